# -*- coding: utf-8 -*-
"""
操作系统课程设计 - 操作日志模块
各管理器记录自己的操作轨迹（用于控制台输出与前端可视化）
"""

from typing import Any, Callable, Dict, List, Optional

from ..config import MAX_LOG_ENTRIES


class OperationLog:
    """
    有界操作日志
    使用自增序号代替真实时间，保证轨迹顺序可复现
    """

    def __init__(self, source: str, max_entries: int = MAX_LOG_ENTRIES):
        self.source = source
        self.max_entries = max_entries
        self.entries: List[Dict[str, Any]] = []
        self.seq = 0
        self.event_emitter: Optional[Callable[[Dict[str, Any]], None]] = None

    def set_event_emitter(self, emitter: Optional[Callable[[Dict[str, Any]], None]]):
        self.event_emitter = emitter

    def record(self, op_type: str, message: str, **details: Any) -> Dict[str, Any]:
        """记录一条操作并推送给事件发射器"""
        self.seq += 1
        entry = {
            'seq': self.seq,
            'source': self.source,
            'type': op_type,
            'message': message,
            **details
        }
        self.entries.append(entry)
        # 只保留最近 max_entries 条日志
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]

        if self.event_emitter:
            self.event_emitter(dict(entry))
        return entry

    def get_entries(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        if count is None:
            return [dict(e) for e in self.entries]
        return [dict(e) for e in self.entries[-count:]] if count > 0 else []
