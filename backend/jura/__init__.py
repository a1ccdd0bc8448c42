"""
Jura 职业助手后端
文档检索增强 (RAG)、职业画像管理和可调用工具的对话 Agent
"""

__version__ = "0.1.0"
