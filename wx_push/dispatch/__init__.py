"""
推送模块
"""

from .pusher import Pusher
from .runner import get_aggregated_data, run_once

__all__ = ['Pusher', 'get_aggregated_data', 'run_once']
