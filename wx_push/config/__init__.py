"""
配置模块
"""
