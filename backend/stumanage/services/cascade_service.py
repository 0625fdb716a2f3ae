"""
Cascade Service - 级联管理服务

处理学院、专业、大班、小班、学生之间的联动操作，确保数据一致性：
- 级联删除：迁移直接下级，或递归强制删除整棵子树
- 批量创建：专业 → 大班 → 小班 一次性展开
- 学生迁移
- 删除预览：与强制删除走同一遍历，只统计不修改
- 层级结构查询

每个公开方法都在一个事务内完成，任何异常都会回滚整个调用。
"""
import logging
from collections import namedtuple
from typing import Callable, Dict, List, Optional, Union

from stumanage.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from stumanage.crud.hierarchy import HierarchyStore, id_of, name_of, set_parent_id
from stumanage.models.hierarchy_level import CASCADE_LEVELS, HierarchyLevel
from stumanage.models.major import Major
from stumanage.models.total_class import TotalClass
from stumanage.models.sub_class import SubClass
from stumanage.schemas.cascade import (
    DeletePreview,
    HierarchyStructure,
    MajorInfo,
    SubClassInfo,
    TotalClassInfo,
)

logger = logging.getLogger(__name__)

# 每个层级的三个操作：查找直接下级、把下级挂到新父级、删除自身
LevelOps = namedtuple("LevelOps", ["find_children", "reparent_child", "delete_self"])

INDENT = "  "

# 名称在同一父级内唯一的层级
SCOPED_NAME_LEVELS = (HierarchyLevel.TOTAL_CLASS, HierarchyLevel.SUB_CLASS)


class CascadeService:
    """级联管理服务"""

    def __init__(self, store: HierarchyStore, subject_service=None):
        """
        Args:
            store: 层级数据访问
            subject_service: 课程协调服务，删除学院并需要同时处理课程时使用
        """
        self.store = store
        self.subject_service = subject_service
        self._ops: Dict[HierarchyLevel, LevelOps] = {
            level: self._build_ops(level) for level in CASCADE_LEVELS
        }

    def _build_ops(self, level: HierarchyLevel) -> LevelOps:
        store = self.store

        def find_children(node_id: int) -> List:
            return store.find_by_parent(level, node_id)

        def reparent_child(child, target_id: int) -> None:
            set_parent_id(child, target_id)
            store.save(child)

        def delete_self(node) -> None:
            store.delete(node)

        return LevelOps(find_children, reparent_child, delete_self)

    def _require(self, level: HierarchyLevel, node_id: Optional[int], message: str = None):
        node = self.store.find_by_id(level, node_id)
        if node is None:
            raise NotFoundError(message or f"{level.label}不存在")
        return node

    # ------------------------------------------------------------------
    # 级联删除
    # ------------------------------------------------------------------

    def cascade_delete(
        self,
        level: Union[HierarchyLevel, str],
        source_id: int,
        target_id: Optional[int] = None,
        force_delete: bool = False,
        cascade_subjects: bool = False,
    ) -> int:
        """
        级联删除节点

        强制删除时先递归删除所有下级（子节点先于父节点），小班下的学生整体删除；
        否则把直接下级迁移到同层级的目标节点后再删除源节点（只迁移一层）。

        Args:
            level: 源节点层级
            source_id: 源节点ID
            target_id: 目标节点ID（迁移模式必填）
            force_delete: 是否强制删除
            cascade_subjects: 删除学院时是否同时迁移/删除其课程

        Returns:
            被删除的记录数（含源节点）
        """
        level = HierarchyLevel.parse(level)
        logger.info(
            f"级联删除开始: {level.value} id={source_id} target={target_id} force={force_delete}"
        )
        with self.store.atomic():
            if cascade_subjects and level is HierarchyLevel.ACADEMY:
                if self.subject_service is None:
                    raise InvalidArgumentError("未配置课程服务，无法同时处理课程")
                self._require(level, source_id)
                if not force_delete:
                    self._check_target(level, source_id, target_id)
                self.subject_service.reconcile_academy_subjects(
                    source_id, None if force_delete else target_id
                )
            removed = self._delete_node(level, source_id, target_id, force_delete)
        logger.info(f"级联删除完成: {level.value} id={source_id}, 共删除 {removed} 条记录")
        return removed

    def _delete_node(
        self,
        level: HierarchyLevel,
        source_id: int,
        target_id: Optional[int],
        force_delete: bool,
    ) -> int:
        source = self._require(level, source_id)
        ops = self._ops[level]
        children = ops.find_children(source_id)

        if force_delete:
            removed = self._force_delete_children(level, children)
        else:
            self._check_target(level, source_id, target_id)
            self._check_name_clashes(level, children, target_id)

            for child in children:
                ops.reparent_child(child, target_id)
                logger.debug(f"迁移 {level.child.label} {name_of(child)} -> {level.label} {target_id}")
            removed = 0

        ops.delete_self(source)
        logger.debug(f"删除 {level.label} {name_of(source)}")
        return removed + 1

    def _check_target(self, level: HierarchyLevel, source_id: int, target_id: Optional[int]) -> None:
        if target_id is None:
            raise InvalidArgumentError(f"必须指定目标{level.label}ID或选择强制删除")
        if target_id == source_id:
            raise InvalidArgumentError(f"目标{level.label}不能与源{level.label}相同")
        if self.store.find_by_id(level, target_id) is None:
            raise InvalidArgumentError(f"目标{level.label}不存在")

    def _check_name_clashes(self, level: HierarchyLevel, children: List, target_id: int) -> None:
        """迁移前确认目标节点下没有与待迁移下级同名的记录"""
        if level.child not in SCOPED_NAME_LEVELS:
            return
        for child in children:
            if self.store.find_by_name_in_parent(level.child, name_of(child), target_id):
                raise ConflictError(
                    f"目标{level.label}下已存在同名{level.child.label}: {name_of(child)}"
                )

    def _force_delete_children(self, level: HierarchyLevel, children: List) -> int:
        if level.child is HierarchyLevel.STUDENT:
            return self.store.delete_all(children)
        return sum(
            self._delete_node(level.child, id_of(child), None, True)
            for child in children
        )

    # ------------------------------------------------------------------
    # 批量创建
    # ------------------------------------------------------------------

    def batch_create_subtree(
        self,
        academy_id: int,
        grade: int,
        major_names: List[str],
        total_class_count_per_major: int,
        sub_class_count_per_total_class: int,
    ) -> int:
        """
        批量创建专业和班级

        已存在的（专业名称, 年级）直接跳过；新专业下创建
        "{专业}{年级}级{i}班" 大班，每个大班下创建 "{大班名}-{j}" 小班。

        Returns:
            新创建的专业数量
        """
        if total_class_count_per_major < 0 or sub_class_count_per_total_class < 0:
            raise InvalidArgumentError("班级数量不能为负数")

        created = 0
        with self.store.atomic():
            self._require(HierarchyLevel.ACADEMY, academy_id)

            for major_name in major_names:
                if not major_name or not major_name.strip():
                    raise InvalidArgumentError("专业名称不能为空")
                if self.store.find_major_by_name_and_grade(major_name, grade) is not None:
                    logger.info(f"专业已存在，跳过: {major_name} ({grade}级)")
                    continue

                major = self.store.save(Major(major_name=major_name, academy_id=academy_id, grade=grade))
                created += 1

                for i in range(1, total_class_count_per_major + 1):
                    total_class = self.store.save(TotalClass(
                        total_class_name=f"{major_name}{grade}级{i}班",
                        major_id=major.major_id,
                    ))
                    for j in range(1, sub_class_count_per_total_class + 1):
                        self.store.save(SubClass(
                            sub_class_name=f"{total_class.total_class_name}-{j}",
                            total_class_id=total_class.total_class_id,
                        ))

        logger.info(f"批量创建完成: 学院 {academy_id}, {grade}级, 新建专业 {created} 个")
        return created

    # ------------------------------------------------------------------
    # 学生迁移
    # ------------------------------------------------------------------

    def migrate_students(self, student_ids: List[int], target_sub_class_id: int) -> int:
        """
        将学生迁移到目标小班

        不存在的学生ID直接跳过，不视为错误。

        Returns:
            实际迁移的学生数
        """
        moved = 0
        with self.store.atomic():
            self._require(HierarchyLevel.SUB_CLASS, target_sub_class_id, "目标小班不存在")
            for student_id in student_ids:
                student = self.store.find_by_id(HierarchyLevel.STUDENT, student_id)
                if student is None:
                    logger.debug(f"学生不存在，跳过: {student_id}")
                    continue
                set_parent_id(student, target_sub_class_id)
                self.store.save(student)
                moved += 1

        logger.info(f"学生迁移完成: {moved}/{len(student_ids)} -> 小班 {target_sub_class_id}")
        return moved

    # ------------------------------------------------------------------
    # 删除预览
    # ------------------------------------------------------------------

    def get_delete_preview(self, level: Union[HierarchyLevel, str], source_id: int) -> DeletePreview:
        """
        删除预览：列出强制删除会移除的全部记录，不做任何修改

        affected_records 包含源节点本身、所有下级节点和学生人数。
        """
        preview = DeletePreview(operation_type=str(getattr(level, "value", level)).upper(), source_id=source_id)
        try:
            level = HierarchyLevel.parse(level)
        except InvalidArgumentError:
            preview.can_delete = False
            preview.warning_message = "不支持的操作类型"
            return preview

        source = self.store.find_by_id(level, source_id)
        if source is None:
            preview.can_delete = False
            preview.warning_message = f"{level.label}不存在"
            return preview

        preview.source_name = name_of(source)
        total = self._walk_subtree(level, source, 0, preview.affected_items.append)

        preview.affected_records = total
        preview.can_delete = True
        preview.warning_message = f"删除{level.label}将影响 {total} 条记录，请谨慎操作！"
        return preview

    def _walk_subtree(self, level: HierarchyLevel, node, depth: int, emit: Callable[[str], None]) -> int:
        emit(f"{INDENT * depth}{level.label}: {name_of(node)}")
        children = self._ops[level].find_children(id_of(node))

        if level.child is HierarchyLevel.STUDENT:
            if children:
                emit(f"{INDENT * (depth + 1)}学生: {len(children)}人")
            return 1 + len(children)

        return 1 + sum(
            self._walk_subtree(level.child, child, depth + 1, emit)
            for child in children
        )

    # ------------------------------------------------------------------
    # 层级结构
    # ------------------------------------------------------------------

    def get_hierarchy_structure(self, academy_id: Optional[int] = None) -> List[HierarchyStructure]:
        """
        获取 学院-专业-大班-小班 的完整层级结构

        Args:
            academy_id: 学院ID（可选，不指定则返回所有学院）
        """
        if academy_id is not None:
            academies = [self._require(HierarchyLevel.ACADEMY, academy_id)]
        else:
            academies = self.store.find_all(HierarchyLevel.ACADEMY)

        store = self.store
        return [
            HierarchyStructure(
                academy_id=academy.academy_id,
                academy_name=academy.academy_name,
                majors=[
                    MajorInfo(
                        major_id=major.major_id,
                        major_name=major.major_name,
                        grade=major.grade,
                        total_classes=[
                            TotalClassInfo(
                                total_class_id=total_class.total_class_id,
                                total_class_name=total_class.total_class_name,
                                sub_classes=[
                                    SubClassInfo(
                                        sub_class_id=sub_class.sub_class_id,
                                        sub_class_name=sub_class.sub_class_name,
                                        student_count=store.count_by_parent(
                                            HierarchyLevel.SUB_CLASS, sub_class.sub_class_id
                                        ),
                                    )
                                    for sub_class in store.find_by_parent(
                                        HierarchyLevel.TOTAL_CLASS, total_class.total_class_id
                                    )
                                ],
                            )
                            for total_class in store.find_by_parent(HierarchyLevel.MAJOR, major.major_id)
                        ],
                    )
                    for major in store.find_by_parent(HierarchyLevel.ACADEMY, academy.academy_id)
                ],
            )
            for academy in academies
        ]
