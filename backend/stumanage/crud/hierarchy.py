"""
Hierarchy Store - 学院/专业/大班/小班/学生 层级数据访问

所有方法只 flush 不 commit，事务边界由调用方通过 atomic() 控制。
"""
from collections import namedtuple
from contextlib import contextmanager
from typing import Any, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from stumanage.core.database import atomic
from stumanage.models.academy import Academy
from stumanage.models.major import Major
from stumanage.models.total_class import TotalClass
from stumanage.models.sub_class import SubClass
from stumanage.models.student import Student
from stumanage.models.teacher import Teacher
from stumanage.models.hierarchy_level import HierarchyLevel


# 每个层级对应的模型、主键列、名称列、父级外键列
LevelMapping = namedtuple("LevelMapping", ["model", "id_attr", "name_attr", "parent_attr"])

LEVEL_MAPPINGS = {
    HierarchyLevel.ACADEMY: LevelMapping(Academy, "academy_id", "academy_name", None),
    HierarchyLevel.MAJOR: LevelMapping(Major, "major_id", "major_name", "academy_id"),
    HierarchyLevel.TOTAL_CLASS: LevelMapping(TotalClass, "total_class_id", "total_class_name", "major_id"),
    HierarchyLevel.SUB_CLASS: LevelMapping(SubClass, "sub_class_id", "sub_class_name", "total_class_id"),
    HierarchyLevel.STUDENT: LevelMapping(Student, "stu_id", "stu_name", "class_id"),
}

_MODEL_LEVELS = {mapping.model: level for level, mapping in LEVEL_MAPPINGS.items()}


def level_of(node) -> HierarchyLevel:
    """根据节点类型判断所在层级"""
    return _MODEL_LEVELS[type(node)]


def id_of(node) -> int:
    return getattr(node, LEVEL_MAPPINGS[level_of(node)].id_attr)


def name_of(node) -> str:
    return getattr(node, LEVEL_MAPPINGS[level_of(node)].name_attr)


def parent_id_of(node) -> Optional[int]:
    parent_attr = LEVEL_MAPPINGS[level_of(node)].parent_attr
    return getattr(node, parent_attr) if parent_attr else None


def set_parent_id(node, parent_id: Optional[int]) -> None:
    parent_attr = LEVEL_MAPPINGS[level_of(node)].parent_attr
    if parent_attr is None:
        raise ValueError(f"{level_of(node).label}没有上级")
    setattr(node, parent_attr, parent_id)


def set_name(node, name: str) -> None:
    setattr(node, LEVEL_MAPPINGS[level_of(node)].name_attr, name)


class HierarchyStore:
    """层级数据访问类"""

    def __init__(self, db: Session):
        """
        Args:
            db: SQLAlchemy 数据库会话
        """
        self.db = db

    @contextmanager
    def atomic(self):
        """在当前会话上开启一个完整事务"""
        with atomic(self.db):
            yield self

    # ---- 通用查询 ----

    def find_by_id(self, level: HierarchyLevel, node_id: Optional[int]) -> Optional[Any]:
        """根据ID获取节点，不存在返回 None"""
        if node_id is None:
            return None
        return self.db.get(LEVEL_MAPPINGS[level].model, node_id)

    def find_all(self, level: HierarchyLevel) -> List[Any]:
        """获取某一层级的所有节点（按主键排序）"""
        mapping = LEVEL_MAPPINGS[level]
        return self.db.query(mapping.model).order_by(getattr(mapping.model, mapping.id_attr)).all()

    def find_by_parent(self, level: HierarchyLevel, parent_id: int) -> List[Any]:
        """
        获取指定节点的直接下级

        Args:
            level: 父节点所在层级
            parent_id: 父节点ID

        Returns:
            下一层级中外键指向该父节点的记录
        """
        child = LEVEL_MAPPINGS[level.child]
        return self.db.query(child.model).filter(
            getattr(child.model, child.parent_attr) == parent_id
        ).order_by(getattr(child.model, child.id_attr)).all()

    def count_by_parent(self, level: HierarchyLevel, parent_id: int) -> int:
        """统计指定节点的直接下级数量"""
        child = LEVEL_MAPPINGS[level.child]
        return self.db.query(func.count(getattr(child.model, child.id_attr))).filter(
            getattr(child.model, child.parent_attr) == parent_id
        ).scalar() or 0

    def find_by_name_in_parent(self, level: HierarchyLevel, name: str, parent_id: Optional[int]) -> List[Any]:
        """查找同一父级下同名的节点"""
        mapping = LEVEL_MAPPINGS[level]
        query = self.db.query(mapping.model).filter(getattr(mapping.model, mapping.name_attr) == name)
        if mapping.parent_attr:
            query = query.filter(getattr(mapping.model, mapping.parent_attr) == parent_id)
        return query.all()

    def find_major_by_name_and_grade(self, major_name: str, grade: Optional[int]) -> Optional[Major]:
        """根据专业名称和年级查询"""
        return self.db.query(Major).filter(
            Major.major_name == major_name,
            Major.grade == grade
        ).first()

    def find_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return self.db.get(Teacher, teacher_id)

    # ---- 写操作 ----

    def save(self, node):
        """保存节点（新增或更新），立即 flush 以便后续查询可见"""
        self.db.add(node)
        self.db.flush()
        return node

    def delete(self, node) -> None:
        self.db.delete(node)
        self.db.flush()

    def delete_by_id(self, level: HierarchyLevel, node_id: int) -> bool:
        node = self.find_by_id(level, node_id)
        if node is None:
            return False
        self.delete(node)
        return True

    def delete_all(self, nodes: List[Any]) -> int:
        """批量删除，返回删除条数"""
        for node in nodes:
            self.db.delete(node)
        self.db.flush()
        return len(nodes)
