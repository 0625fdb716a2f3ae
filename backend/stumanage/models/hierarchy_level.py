"""
Hierarchy Level - 层级枚举
"""
from enum import Enum

from stumanage.core.exceptions import InvalidArgumentError


class HierarchyLevel(str, Enum):
    ACADEMY = "ACADEMY"
    MAJOR = "MAJOR"
    TOTAL_CLASS = "TOTAL_CLASS"
    SUB_CLASS = "SUB_CLASS"
    STUDENT = "STUDENT"

    @property
    def child(self):
        """下一级层级，学生为叶子节点"""
        return _CHILD_LEVEL.get(self)

    @property
    def parent(self):
        return _PARENT_LEVEL.get(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value) -> "HierarchyLevel":
        """解析操作类型字符串（不区分大小写），仅接受四个可级联的层级"""
        if isinstance(value, cls):
            level = value
        else:
            try:
                level = cls(str(value).strip().upper())
            except ValueError:
                raise InvalidArgumentError(f"不支持的操作类型: {value}")
        if level not in CASCADE_LEVELS:
            raise InvalidArgumentError(f"不支持的操作类型: {value}")
        return level


_CHILD_LEVEL = {
    HierarchyLevel.ACADEMY: HierarchyLevel.MAJOR,
    HierarchyLevel.MAJOR: HierarchyLevel.TOTAL_CLASS,
    HierarchyLevel.TOTAL_CLASS: HierarchyLevel.SUB_CLASS,
    HierarchyLevel.SUB_CLASS: HierarchyLevel.STUDENT,
}

_PARENT_LEVEL = {child: parent for parent, child in _CHILD_LEVEL.items()}

_LABELS = {
    HierarchyLevel.ACADEMY: "学院",
    HierarchyLevel.MAJOR: "专业",
    HierarchyLevel.TOTAL_CLASS: "大班",
    HierarchyLevel.SUB_CLASS: "小班",
    HierarchyLevel.STUDENT: "学生",
}

# 可以作为级联操作源的层级
CASCADE_LEVELS = (
    HierarchyLevel.ACADEMY,
    HierarchyLevel.MAJOR,
    HierarchyLevel.TOTAL_CLASS,
    HierarchyLevel.SUB_CLASS,
)
