"""
/**
 * @file template_translator/__init__.py
 * @description SendGrid 模板翻译服务。
 */
"""

__version__ = "0.1.0"
