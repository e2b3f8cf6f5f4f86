"""
/**
 * @file template_translator/__main__.py
 * @description 本地启动入口：python -m template_translator
 */
"""

import os

import uvicorn


def main():
    uvicorn.run(
        "template_translator.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
