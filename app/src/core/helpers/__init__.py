from .locks import KeyedLock
from .response import IResponseBase, build_json_response, build_list_response

__all__ = ["KeyedLock", "IResponseBase", "build_json_response", "build_list_response"]
