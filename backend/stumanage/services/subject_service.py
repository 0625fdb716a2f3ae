"""
Subject Service - 学院与课程的联动

课程表通过学院名称字符串关联学院，删除或迁移学院时需要按名称同步处理课程。
"""
import logging
from collections import Counter
from typing import List, Optional

from stumanage.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from stumanage.crud.hierarchy import HierarchyStore
from stumanage.crud.subject import SubjectStore
from stumanage.models.hierarchy_level import HierarchyLevel
from stumanage.schemas.cascade import AcademyStatisticsResponse

logger = logging.getLogger(__name__)


class SubjectService:
    """课程协调服务"""

    def __init__(self, hierarchy_store: HierarchyStore, subject_store: SubjectStore):
        self.hierarchy_store = hierarchy_store
        self.subject_store = subject_store

    def cascade_delete_academy_subjects(self, academy_id: int, target_academy_id: Optional[int] = None) -> int:
        """
        删除学院时处理课程

        指定目标学院时把课程转到目标学院名下，目标学院已有同名课程的直接删除原课程；
        未指定目标时删除该学院的所有课程。

        Returns:
            处理的课程数
        """
        with self.subject_store.atomic():
            return self.reconcile_academy_subjects(academy_id, target_academy_id)

    def reconcile_academy_subjects(self, academy_id: int, target_academy_id: Optional[int] = None) -> int:
        """cascade_delete_academy_subjects 的事务内版本，供级联删除学院时复用"""
        academy = self.hierarchy_store.find_by_id(HierarchyLevel.ACADEMY, academy_id)
        if academy is None:
            raise NotFoundError(f"学院不存在: {academy_id}")

        subjects = self.subject_store.find_by_academy(academy.academy_name)

        if target_academy_id is None:
            deleted = self.subject_store.delete_all(subjects)
            logger.info(f"删除学院 {academy.academy_name} 的课程 {deleted} 门")
            return deleted

        target = self.hierarchy_store.find_by_id(HierarchyLevel.ACADEMY, target_academy_id)
        if target is None:
            raise NotFoundError(f"目标学院不存在: {target_academy_id}")

        migrated = dropped = 0
        for subject in subjects:
            if self.subject_store.find_by_academy_and_name(target.academy_name, subject.subject_name) is not None:
                # 目标学院已有同名课程
                self.subject_store.delete(subject)
                dropped += 1
            else:
                subject.subject_academy = target.academy_name
                self.subject_store.save(subject)
                migrated += 1

        logger.info(
            f"学院 {academy.academy_name} 课程迁移到 {target.academy_name}: "
            f"迁移 {migrated} 门, 重名删除 {dropped} 门"
        )
        return migrated + dropped

    def batch_update_subject_academy(self, subject_ids: List[int], new_academy: str) -> int:
        """批量修改课程所属学院，目标学院已有同名课程时整批失败"""
        if not new_academy or not new_academy.strip():
            raise InvalidArgumentError("学院名称不能为空")

        updated = 0
        with self.subject_store.atomic():
            for subject_id in subject_ids:
                subject = self.subject_store.find_by_id(subject_id)
                if subject is None:
                    continue
                existing = self.subject_store.find_by_academy_and_name(new_academy, subject.subject_name)
                if existing is not None and existing.subject_id != subject.subject_id:
                    raise ConflictError(f"目标学院已存在同名课程: {subject.subject_name}")
                subject.subject_academy = new_academy
                self.subject_store.save(subject)
                updated += 1
        return updated

    def batch_update_subject_credit(self, subject_ids: List[int], new_credit: float) -> int:
        """批量修改课程学分"""
        if new_credit is None or new_credit <= 0:
            raise InvalidArgumentError(f"学分无效: {new_credit}")

        updated = 0
        with self.subject_store.atomic():
            for subject_id in subject_ids:
                subject = self.subject_store.find_by_id(subject_id)
                if subject is None:
                    continue
                subject.credit = new_credit
                self.subject_store.save(subject)
                updated += 1
        return updated

    def get_academy_statistics(self, academy_name: str) -> AcademyStatisticsResponse:
        """学院课程统计；学院存在时一并统计专业、班级、学生数量"""
        stats = AcademyStatisticsResponse(
            academy_name=academy_name,
            subject_count=self.subject_store.count_by_academy(academy_name),
            total_credits=self.subject_store.sum_credit_by_academy(academy_name),
            credits=self.subject_store.find_credits_by_academy(academy_name),
        )

        academy = self.hierarchy_store.find_by_name_in_parent(HierarchyLevel.ACADEMY, academy_name, None)
        if not academy:
            return stats

        store = self.hierarchy_store
        for major in store.find_by_parent(HierarchyLevel.ACADEMY, academy[0].academy_id):
            stats.major_count += 1
            for total_class in store.find_by_parent(HierarchyLevel.MAJOR, major.major_id):
                stats.total_class_count += 1
                for sub_class in store.find_by_parent(HierarchyLevel.TOTAL_CLASS, total_class.total_class_id):
                    stats.sub_class_count += 1
                    stats.student_count += store.count_by_parent(HierarchyLevel.SUB_CLASS, sub_class.sub_class_id)
        return stats

    def validate_subject_data_integrity(self) -> List[str]:
        """
        验证课程数据完整性

        检查未指定学院、未指定名称、学分非正数的课程，以及同一学院下的重复课程。
        """
        errors = []
        for subject in self.subject_store.find_all():
            if subject.subject_academy is None or not subject.subject_academy.strip():
                errors.append(f"课程 '{subject.subject_name}' 没有指定学院")
            if subject.subject_name is None or not subject.subject_name.strip():
                errors.append(f"课程ID {subject.subject_id} 没有指定课程名称")
            if subject.credit is None or subject.credit <= 0:
                errors.append(f"课程 '{subject.subject_name}' 学分无效: {subject.credit}")

        for academy in self.subject_store.find_all_academies():
            names = Counter(s.subject_name for s in self.subject_store.find_by_academy(academy))
            for name, count in names.items():
                if count > 1:
                    errors.append(f"学院 '{academy}' 存在重复课程: {name}")
        return errors
