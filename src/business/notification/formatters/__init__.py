"""
Message Formatters - 消息格式化器

支持的格式：
- ComplianceFormatter: 合规评估结果格式化
"""

from src.business.notification.formatters.compliance_formatter import (
    ComplianceFormatter,
    format_violation,
    violation_color,
)

__all__ = ["ComplianceFormatter", "format_violation", "violation_color"]
