"""
服务入口

    python -m jura.main
    uvicorn jura.api.app:create_app --factory
"""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "jura.api.app:create_app",
        factory=True,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
