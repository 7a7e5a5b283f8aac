__version__ = "0.4.0"
__description__ = "jsonapi_fmt : JSON:API response formatting for Flask"
