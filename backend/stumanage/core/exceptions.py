"""
Cascade Exceptions - 级联操作异常

服务层抛出，由 main.py 中注册的异常处理器统一转换为 JSON 响应。
"""


class CascadeError(Exception):
    """级联子系统异常基类"""
    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(CascadeError):
    """
    引用的记录不存在。

    例如：源学院、目标专业、辅导员、目标小班。
    """
    status_code = 404

    def __init__(self, message: str = "记录不存在"):
        super().__init__(message, self.status_code)


class InvalidArgumentError(CascadeError):
    """
    参数缺失或非法。

    例如：既未指定目标也未选择强制删除、更新列表为空、不支持的操作类型。
    """
    status_code = 400

    def __init__(self, message: str = "参数无效"):
        super().__init__(message, self.status_code)


class ConflictError(CascadeError):
    """同一父级下名称重复等唯一性冲突"""
    status_code = 409

    def __init__(self, message: str = "数据冲突"):
        super().__init__(message, self.status_code)
