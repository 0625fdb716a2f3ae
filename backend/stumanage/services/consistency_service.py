"""
Consistency Service - 数据一致性检查

自上而下遍历 学院 → 专业 → 大班 → 小班 → 学生，记录可到达的节点；
再扫描每一层级中遍历不到的记录，找出父级外键指向不存在记录的孤儿数据。只读，不抛异常。
"""
import logging
from collections import Counter, defaultdict
from typing import Dict, Set

from stumanage.crud.hierarchy import HierarchyStore, id_of, name_of, parent_id_of
from stumanage.models.hierarchy_level import HierarchyLevel
from stumanage.schemas.cascade import ConsistencyCheckResult

logger = logging.getLogger(__name__)

# 需要核对父级的层级
CHILD_LEVELS = (
    HierarchyLevel.MAJOR,
    HierarchyLevel.TOTAL_CLASS,
    HierarchyLevel.SUB_CLASS,
    HierarchyLevel.STUDENT,
)


class ConsistencyAuditor:
    """层级数据一致性检查"""

    def __init__(self, store: HierarchyStore):
        self.store = store

    def check_consistency(self) -> ConsistencyCheckResult:
        result = ConsistencyCheckResult()

        reached = self._walk_tree()
        self._check_unreached(reached, result)
        self._check_duplicate_names(result)

        logger.info(f"一致性检查完成: {len(result.errors)} 个错误, {len(result.warnings)} 个警告")
        return result

    def _walk_tree(self) -> Dict[HierarchyLevel, Set[int]]:
        """自学院起逐层向下遍历，记录能从某个学院到达的节点ID"""
        reached = defaultdict(set)
        for academy in self.store.find_all(HierarchyLevel.ACADEMY):
            reached[HierarchyLevel.ACADEMY].add(id_of(academy))
            self._walk_children(HierarchyLevel.ACADEMY, id_of(academy), reached)
        return reached

    def _walk_children(self, level: HierarchyLevel, parent_id: int, reached) -> None:
        for child in self.store.find_by_parent(level, parent_id):
            reached[level.child].add(id_of(child))
            if level.child is not HierarchyLevel.STUDENT:
                self._walk_children(level.child, id_of(child), reached)

    def _check_unreached(self, reached, result: ConsistencyCheckResult) -> None:
        """
        遍历不到的记录：父级外键为空记为警告，指向不存在的父记录记为错误；
        父记录存在但本身遍历不到的只在父记录处报告一次
        """
        for level in CHILD_LEVELS:
            parent_level = level.parent
            for node in self.store.find_all(level):
                if id_of(node) in reached[level]:
                    continue
                parent_id = parent_id_of(node)
                if parent_id is None:
                    result.warnings.append(
                        f"{level.label} {name_of(node)}（ID {id_of(node)}）未关联{parent_level.label}"
                    )
                elif self.store.find_by_id(parent_level, parent_id) is None:
                    result.errors.append(
                        f"{level.label} {name_of(node)}（ID {id_of(node)}）关联的{parent_level.label} {parent_id} 不存在"
                    )

    def _check_duplicate_names(self, result: ConsistencyCheckResult) -> None:
        """同一父级下重名（迁移合并后可能出现）"""
        majors = Counter(
            (major.major_name, major.grade) for major in self.store.find_all(HierarchyLevel.MAJOR)
        )
        for (major_name, grade), count in sorted(majors.items(), key=lambda kv: str(kv[0])):
            if count > 1:
                result.warnings.append(f"专业 {major_name}（{grade}级）重复 {count} 次")

        for level in (HierarchyLevel.TOTAL_CLASS, HierarchyLevel.SUB_CLASS):
            names = Counter(
                (parent_id_of(node), name_of(node)) for node in self.store.find_all(level)
            )
            for (parent_id, name), count in names.items():
                if count > 1:
                    result.warnings.append(
                        f"{level.parent.label} {parent_id} 下存在重名{level.label}: {name}"
                    )
