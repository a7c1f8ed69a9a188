"""DITA-OT MCP 入口点。

支持: python -m dita_ot_mcp
"""

from .app import main

if __name__ == "__main__":
    main()
