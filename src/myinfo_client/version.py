"""Version information for the MyInfo client SDK"""

import platform

API_VERSION = "v2"
SDK_VERSION = "0.1.0"
SDK_LANGUAGE = "Python"


def get_user_agent(hide_version: bool = False) -> str:
    """Get User-Agent string sent with every API request"""
    if hide_version:
        return f"MyInfo-Client ({SDK_LANGUAGE})"
    return f"MyInfo-Client/{SDK_VERSION} ({SDK_LANGUAGE}/{platform.python_version()})"
