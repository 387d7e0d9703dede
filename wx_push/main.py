"""
命令行入口，执行一次推送后退出
"""

import asyncio
import logging
import sys

from wx_push.config.settings import settings
from wx_push.core.errors import ConfigError
from wx_push.dispatch.runner import run_once

logger = logging.getLogger(__name__)


def setup_logging():
    """配置日志"""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def main() -> int:
    setup_logging()

    try:
        settings.validate()
    except ValueError as e:
        logger.error(f"环境变量配置错误: {e}")
        return 1

    try:
        summary = asyncio.run(run_once(settings))
    except ConfigError as e:
        logger.error(f"配置错误，终止推送: {e}")
        return 1

    if summary is None:
        return 1

    logger.info(f"推送结果: {summary.to_dict()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
