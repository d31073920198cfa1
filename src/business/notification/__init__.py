"""
Notification - 结果展示

消息格式化：
- formatters: 合规结果格式化器
"""

from src.business.notification.formatters import ComplianceFormatter, format_violation, violation_color

__all__ = ["ComplianceFormatter", "format_violation", "violation_color"]
