"""服务入口 -- python -m commentpilot.gateway"""

import uvicorn
from commentpilot.core.config import get_host, get_port


def main() -> None:
    uvicorn.run(
        "commentpilot.gateway.main:app",
        host=get_host(),
        port=get_port(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
