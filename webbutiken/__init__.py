APP_NAME = "webbutiken-api"
__version__ = "0.1.0"
