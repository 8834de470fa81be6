# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 配置文件
模拟内存、磁盘、文件目录与处理机调度的全局配置
"""

# ==================== 内存配置 ====================
MEMORY_SIZE = 1024       # 主存总大小（单位）
MAX_MEMORY_BLOCKS = 100  # 内存分区表最大项数

# ==================== 磁盘配置 ====================
BLOCK_SIZE = 32          # 每个盘块大小（字节）
DISK_SIZE = 1024         # 磁盘总大小（字节）
BLOCK_COUNT = DISK_SIZE // BLOCK_SIZE  # 盘块数量 N=32

# ==================== 文件目录配置 ====================
MAX_FILES = 100          # 目录最多容纳的文件数
MAX_FILENAME_LEN = 50    # 文件名最大长度

# ==================== 进程调度配置 ====================
MAX_TASKS = 100          # 任务表最大任务数
TIME_QUANTUM = 2         # 时间片大小（逻辑时间单位）

# ==================== 日志配置 ====================
MAX_LOG_ENTRIES = 100    # 每个管理器保留的操作日志条数

# ==================== 服务配置 ====================
SERVER_HOST = '0.0.0.0'
SERVER_PORT = 3456
