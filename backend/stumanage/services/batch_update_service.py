"""
Batch Update Service - 批量更新

对同一层级的多个实体批量改名、调整父级、更新附加字段。
整批在一个事务内执行，任一项失败则全部回滚。
"""
import logging
from typing import Any, Dict, List, Optional

from stumanage.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from stumanage.crud.hierarchy import HierarchyStore, id_of, name_of, parent_id_of, set_name, set_parent_id
from stumanage.models.hierarchy_level import HierarchyLevel
from stumanage.schemas.cascade import UpdateItem

logger = logging.getLogger(__name__)

# 学院附加字段：请求中的键 -> 模型属性
ACADEMY_EXTRA_FIELDS = {
    "academyCode": "academy_code",
    "academy_code": "academy_code",
    "deanName": "dean_name",
    "dean_name": "dean_name",
    "contactPhone": "contact_phone",
    "contact_phone": "contact_phone",
    "address": "address",
}


class BatchUpdateApplicator:
    """批量更新服务"""

    def __init__(self, store: HierarchyStore):
        self.store = store

    def batch_update(self, update_type: str, updates: Optional[List[UpdateItem]]) -> int:
        """
        批量更新

        Args:
            update_type: ACADEMY, MAJOR, TOTAL_CLASS, SUB_CLASS
            updates: 更新项目列表

        Returns:
            更新的记录数
        """
        if not updates:
            raise InvalidArgumentError("更新项目列表不能为空")
        level = HierarchyLevel.parse(update_type)

        with self.store.atomic():
            for item in updates:
                self._apply(level, item)

        logger.info(f"批量更新完成: {level.value} 共 {len(updates)} 项")
        return len(updates)

    def _apply(self, level: HierarchyLevel, item: UpdateItem) -> None:
        node = self.store.find_by_id(level, item.id)
        if node is None:
            raise NotFoundError(f"{level.label}不存在: {item.id}")

        if item.name is not None:
            set_name(node, item.name)

        if item.parent_id is not None:
            if level is HierarchyLevel.ACADEMY:
                raise InvalidArgumentError("学院没有上级，不能指定parentId")
            if self.store.find_by_id(level.parent, item.parent_id) is None:
                raise NotFoundError(f"目标{level.parent.label}不存在: {item.parent_id}")
            set_parent_id(node, item.parent_id)

        if level is HierarchyLevel.ACADEMY:
            self._apply_academy_fields(node, item)
        elif level is HierarchyLevel.MAJOR:
            self._apply_major_fields(node, item.additional_fields or {})

        self._check_unique(level, node)
        self.store.save(node)

    def _apply_academy_fields(self, academy, item: UpdateItem) -> None:
        if item.description is not None:
            academy.description = item.description
        for key, value in (item.additional_fields or {}).items():
            attr = ACADEMY_EXTRA_FIELDS.get(key)
            if attr:
                setattr(academy, attr, value)

    def _apply_major_fields(self, major, fields: Dict[str, Any]) -> None:
        if "grade" in fields:
            try:
                major.grade = int(fields["grade"]) if fields["grade"] is not None else None
            except (TypeError, ValueError):
                raise InvalidArgumentError(f"年级无效: {fields['grade']}")

        counselor_id = fields.get("counselorId", fields.get("counselor_id"))
        if counselor_id is not None:
            counselor = self.store.find_teacher(counselor_id)
            if counselor is None:
                raise NotFoundError(f"辅导员不存在: {counselor_id}")
            major.counselor_id = counselor.teacher_id

    def _check_unique(self, level: HierarchyLevel, node) -> None:
        """改名或调整父级后不能与同一范围内的其他记录重名"""
        if level is HierarchyLevel.MAJOR:
            other = self.store.find_major_by_name_and_grade(node.major_name, node.grade)
            clashes = [other] if other is not None else []
        else:
            clashes = self.store.find_by_name_in_parent(level, name_of(node), parent_id_of(node))

        for other in clashes:
            if id_of(other) != id_of(node):
                raise ConflictError(f"{level.label}名称已存在: {name_of(node)}")
