"""
Business Layer - 业务模块层

Prop firm 账户监控的业务逻辑层，包含：
- compliance: 规则合规检查与阶段晋级
- notification: 结果格式化
- config: 规则模板配置
- cli: 命令行工具
"""
