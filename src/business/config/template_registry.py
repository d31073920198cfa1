"""
Template Registry - 规则模板注册表

管理配置驱动的 prop firm 规则模板。

使用方式:
    registry = TemplateRegistry()

    # 列出所有模板
    names = registry.list_templates()

    # 按名称获取模板
    template = registry.get("PropNumberOne Challenge 7k")

    # 按 prop firm 过滤
    templates = registry.by_prop_firm("FTMO")
"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from src.business.config.rules_config import ConfigurationError, PropFirmTemplate

logger = logging.getLogger(__name__)

# 默认配置文件路径
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "propfirm" / "templates.yaml"

TEMPLATES_PATH_ENV = "PROPFIRM_TEMPLATES_PATH"


class TemplateRegistryError(ConfigurationError):
    """模板注册表相关错误"""

    pass


class TemplateRegistry:
    """规则模板注册表

    配置文件结构:
    ```yaml
    templates:
      - name: "PropNumberOne Challenge 7k"
        prop_firm: PropNumberOne
        account_size: 7000
        currency: USD
        rules:
          phase1: {...}
          phase2: {...}
          funded: {...}
    ```

    Attributes:
        config_path: 配置文件路径
        _templates: 已加载的模板 (name -> template)
    """

    def __init__(self, config_path: Path | str | None = None) -> None:
        """初始化模板注册表

        Args:
            config_path: 配置文件路径。未指定时依次使用环境变量
                PROPFIRM_TEMPLATES_PATH 和 config/propfirm/templates.yaml
        """
        if config_path is None:
            load_dotenv()
            config_path = os.getenv(TEMPLATES_PATH_ENV) or DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path)
        self._templates: dict[str, PropFirmTemplate] | None = None

    @property
    def templates(self) -> dict[str, PropFirmTemplate]:
        """懒加载模板"""
        if self._templates is None:
            self._templates = self._load_templates()
        return self._templates

    def _load_templates(self) -> dict[str, PropFirmTemplate]:
        """加载配置文件

        Raises:
            TemplateRegistryError: 配置文件不存在、为空或格式错误
        """
        if not self.config_path.exists():
            raise TemplateRegistryError(f"Template file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TemplateRegistryError(f"Malformed template file: {e}") from e

        if not config:
            raise TemplateRegistryError(f"Template file is empty: {self.config_path}")
        if not isinstance(config, dict):
            raise TemplateRegistryError(
                f"Template file must be a mapping with a 'templates' list: {self.config_path}"
            )

        entries = config.get("templates")
        if not entries:
            raise TemplateRegistryError(f"Template file is empty: {self.config_path}")
        if not isinstance(entries, list):
            raise TemplateRegistryError(f"'templates' must be a list: {self.config_path}")

        templates: dict[str, PropFirmTemplate] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                raise TemplateRegistryError(
                    f"Invalid template in {self.config_path}: expected a mapping, got {entry!r}"
                )
            try:
                template = PropFirmTemplate.from_dict(entry)
            except (ConfigurationError, TypeError, ValueError) as e:
                raise TemplateRegistryError(f"Invalid template in {self.config_path}: {e}") from e
            if template.name in templates:
                logger.warning(f"Duplicate template '{template.name}', keeping the last one")
            templates[template.name] = template

        logger.debug(f"Loaded {len(templates)} templates from {self.config_path}")
        return templates

    def list_templates(self) -> list[str]:
        """列出所有模板名称"""
        return sorted(self.templates)

    def get(self, name: str) -> PropFirmTemplate:
        """按名称获取模板

        Raises:
            TemplateRegistryError: 模板不存在
        """
        template = self.templates.get(name)
        if template is None:
            raise TemplateRegistryError(f"Template not found: {name}")
        return template

    def by_prop_firm(self, prop_firm: str) -> list[PropFirmTemplate]:
        """获取指定 prop firm 的全部模板（按账户规模排序）"""
        wanted = prop_firm.strip().lower()
        matched = [t for t in self.templates.values() if t.prop_firm.lower() == wanted]
        return sorted(matched, key=lambda t: t.account_size)
