"""
Configuration Management - 配置管理

加载和管理业务层配置：
- PropFirmTemplate / PropFirmRules / PhaseRules: 规则模板
- TemplateRegistry: 模板注册表
"""

from src.business.config.rules_config import (
    ConfigurationError,
    PhaseRules,
    PropFirmRules,
    PropFirmTemplate,
    SimpleProtectionRules,
)
from src.business.config.template_registry import TemplateRegistry, TemplateRegistryError

__all__ = [
    "ConfigurationError",
    "PhaseRules",
    "PropFirmRules",
    "PropFirmTemplate",
    "SimpleProtectionRules",
    "TemplateRegistry",
    "TemplateRegistryError",
]
