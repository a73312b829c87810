"""
Tweak Server Entry Point - Start the local tweak server
Run with: python run.py
"""

from tweak_core.tool_config import ToolConfig
from tweak_server.app import app

# Host and port come from tweak.json (defaults: 127.0.0.1:19877)
tool_config = ToolConfig()

if __name__ == '__main__':
    app.run(debug=False, host=tool_config.host, port=tool_config.port)
