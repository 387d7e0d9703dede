"""
推送配置加载
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.errors import ConfigError
from ..core.models import DateEntry, Festival, Slot, User

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """一次推送所需的全部配置"""
    APP_ID: str = ""
    APP_SECRET: str = ""
    PROVINCE: Optional[str] = None
    CITY: Optional[str] = None
    USERS: List[User] = field(default_factory=list)
    FESTIVALS: List[Festival] = field(default_factory=list)
    FESTIVALS_LIMIT: Optional[int] = None
    CUSTOMIZED_DATE_LIST: List[DateEntry] = field(default_factory=list)
    SLOT_LIST: List[Slot] = field(default_factory=list)
    LITERARY_PREFERENCE: Optional[str] = None
    CALLBACK_TEMPLATE_ID: Optional[str] = None
    CALLBACK_USERS: List[User] = field(default_factory=list)


def _list_of(raw: Dict[str, Any], key: str) -> list:
    """只接受数组，其余情况视为空"""
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning(f"配置项 {key} 不是数组，已忽略")
        return []
    return value


def parse_app_config(raw: Any, env_app_id: str = "", env_app_secret: str = "") -> AppConfig:
    """
    把配置字典转换为 AppConfig

    Args:
        raw: yaml 解析结果
        env_app_id: 环境变量中的 APP_ID，配置文件未填写时使用
        env_app_secret: 环境变量中的 APP_SECRET

    Returns:
        AppConfig: 配置对象

    Raises:
        ConfigError: 配置不是字典或缺少 USERS 数组
    """
    if not isinstance(raw, dict):
        raise ConfigError("配置文件内容格式错误，应为键值对")

    users = raw.get('USERS')
    if not isinstance(users, list):
        logger.error("配置文件中找不到USERS数组")
        raise ConfigError("配置文件中找不到USERS数组")

    limit = raw.get('FESTIVALS_LIMIT')
    try:
        limit = int(limit) if limit not in (None, '') else None
    except (TypeError, ValueError):
        logger.warning(f"FESTIVALS_LIMIT 不是数字，已忽略: {limit}")
        limit = None

    return AppConfig(
        APP_ID=str(raw.get('APP_ID') or env_app_id or ''),
        APP_SECRET=str(raw.get('APP_SECRET') or env_app_secret or ''),
        PROVINCE=raw.get('PROVINCE'),
        CITY=raw.get('CITY'),
        USERS=[User.from_dict(u) for u in users if isinstance(u, dict)],
        FESTIVALS=[Festival.from_dict(f) for f in _list_of(raw, 'FESTIVALS') if isinstance(f, dict)],
        FESTIVALS_LIMIT=limit,
        CUSTOMIZED_DATE_LIST=[DateEntry.from_dict(d) for d in _list_of(raw, 'CUSTOMIZED_DATE_LIST') if isinstance(d, dict)],
        SLOT_LIST=[Slot.from_dict(s) for s in _list_of(raw, 'SLOT_LIST') if isinstance(s, dict)],
        LITERARY_PREFERENCE=raw.get('LITERARY_PREFERENCE'),
        CALLBACK_TEMPLATE_ID=raw.get('CALLBACK_TEMPLATE_ID'),
        CALLBACK_USERS=[User.from_dict(u) for u in _list_of(raw, 'CALLBACK_USERS') if isinstance(u, dict)],
    )


def load_app_config(config_path: str, env_app_id: str = "", env_app_secret: str = "") -> AppConfig:
    """读取 yaml 推送配置"""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件解析失败: {e}") from e

    config = parse_app_config(raw, env_app_id, env_app_secret)
    logger.info(f"配置加载完成: {config_path}, 用户数={len(config.USERS)}")
    return config
