# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 处理机、内存与文件管理模拟器
"""

__version__ = '0.1.0'
