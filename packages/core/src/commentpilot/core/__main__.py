"""CLI 入口模块 -- python -m commentpilot.core <command>

支持的命令：
  show-config  打印当前生效的运行配置
"""

import sys

from .config import (
    CHANNEL_QUEUE_MAXSIZE,
    SSE_HEARTBEAT_INTERVAL,
    STORAGE_PATH_SUFFIX,
    STORAGE_TIMEOUT_S,
    get_env,
    get_host,
    get_port,
    get_storage_base_url,
)


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m commentpilot.core <command>")
        print("命令:")
        print("  show-config  打印当前生效的运行配置")
        sys.exit(1)

    command = sys.argv[1]

    if command == "show-config":
        show_config()
    else:
        print(f"未知命令: {command}")
        print("可用命令: show-config")
        sys.exit(1)


def show_config() -> None:
    """打印当前生效的运行配置"""
    storage_base_url = get_storage_base_url()

    print(f"运行环境: {get_env()}")
    print(f"监听地址: {get_host()}:{get_port()}")
    if storage_base_url:
        print(f"存储回调: {storage_base_url}{STORAGE_PATH_SUFFIX}")
    else:
        print("存储回调: (未配置)")
    print(f"存储超时: {STORAGE_TIMEOUT_S}s")
    print(f"SSE 心跳间隔: {SSE_HEARTBEAT_INTERVAL}s")
    print(f"通道队列容量: {CHANNEL_QUEUE_MAXSIZE}")


if __name__ == "__main__":
    main()
