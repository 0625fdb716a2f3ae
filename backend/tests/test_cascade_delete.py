"""
级联删除测试
"""
import pytest

from conftest import count
from stumanage.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from stumanage.models.academy import Academy
from stumanage.models.hierarchy_level import HierarchyLevel
from stumanage.models.major import Major
from stumanage.models.total_class import TotalClass
from stumanage.models.sub_class import SubClass
from stumanage.models.student import Student
from stumanage.models.subject import Subject


class TestForceDelete:

    def test_force_delete_academy_removes_whole_subtree(self, scenario, cascade):
        removed = cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, None, True)

        db = scenario
        assert db.get(Academy, 1) is None
        for major_id in (10, 11):
            assert db.get(Major, major_id) is None
        for total_class_id in (100, 110):
            assert db.get(TotalClass, total_class_id) is None
        for sub_class_id in (1000, 1100, 1101):
            assert db.get(SubClass, sub_class_id) is None
        for stu_id in (10000, 11000, 11001):
            assert db.get(Student, stu_id) is None

        # academy + 2 majors + 2 total classes + 3 sub classes + 3 students
        assert removed == 11

    def test_force_delete_leaves_other_branches(self, scenario, cascade):
        cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, None, True)

        db = scenario
        assert db.get(Academy, 2) is not None
        assert db.get(Major, 20) is not None
        assert db.get(SubClass, 2000) is not None
        assert db.get(Student, 20000).class_id == 2000

    def test_force_delete_total_class_scenario(self, scenario, cascade):
        cascade.cascade_delete(HierarchyLevel.TOTAL_CLASS, 100, None, True)

        db = scenario
        assert db.get(SubClass, 1000) is None
        assert db.get(Student, 10000) is None
        assert db.get(TotalClass, 100) is None
        assert db.get(Major, 10) is not None
        assert db.get(Academy, 1) is not None

    def test_force_delete_ignores_target(self, scenario, cascade):
        cascade.cascade_delete("sub_class", 1100, 1101, True)

        db = scenario
        assert db.get(SubClass, 1100) is None
        assert db.get(Student, 11000) is None
        assert db.get(Student, 11001) is None

    def test_force_delete_childless_node(self, scenario, cascade):
        removed = cascade.cascade_delete(HierarchyLevel.SUB_CLASS, 1101, None, True)

        assert removed == 1
        assert scenario.get(SubClass, 1101) is None


class TestMigrateDelete:

    def test_migrate_academy_reparents_direct_children_only(self, scenario, cascade):
        cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, 2, False)

        db = scenario
        assert db.get(Academy, 1) is None
        assert db.get(Major, 10).academy_id == 2
        assert db.get(Major, 11).academy_id == 2
        # 孙级不受影响
        assert db.get(TotalClass, 100).major_id == 10
        assert db.get(TotalClass, 110).major_id == 11
        assert count(db, Student) == 4

    def test_migrate_sub_class_moves_students(self, scenario, cascade):
        removed = cascade.cascade_delete(HierarchyLevel.SUB_CLASS, 1100, 1101, False)

        db = scenario
        assert removed == 1
        assert db.get(SubClass, 1100) is None
        assert db.get(Student, 11000).class_id == 1101
        assert db.get(Student, 11001).class_id == 1101

    def test_migrate_major_across_academies(self, scenario, cascade):
        cascade.cascade_delete(HierarchyLevel.MAJOR, 11, 20, False)

        db = scenario
        assert db.get(Major, 11) is None
        assert db.get(TotalClass, 110).major_id == 20
        assert db.get(SubClass, 1100).total_class_id == 110

    def test_missing_target_requires_force(self, scenario, cascade):
        with pytest.raises(InvalidArgumentError, match="必须指定目标专业ID或选择强制删除"):
            cascade.cascade_delete(HierarchyLevel.MAJOR, 10, None, False)
        assert scenario.get(Major, 10) is not None

    def test_unknown_target_is_rejected(self, scenario, cascade):
        with pytest.raises(InvalidArgumentError, match="目标大班不存在"):
            cascade.cascade_delete(HierarchyLevel.TOTAL_CLASS, 100, 999, False)
        assert scenario.get(TotalClass, 100) is not None

    def test_target_of_other_level_is_rejected(self, scenario, cascade):
        # 1000 是小班ID，不是大班ID
        with pytest.raises(InvalidArgumentError):
            cascade.cascade_delete(HierarchyLevel.TOTAL_CLASS, 100, 1000, False)

    def test_target_equal_to_source_is_rejected(self, scenario, cascade):
        with pytest.raises(InvalidArgumentError):
            cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, 1, False)
        assert scenario.get(Academy, 1) is not None

    def test_sub_class_name_clash_in_target_is_a_conflict(self, scenario, cascade):
        db = scenario
        db.get(SubClass, 2000).sub_class_name = "EE2025级1班-1"
        db.commit()

        with pytest.raises(ConflictError, match="EE2025级1班-1"):
            cascade.cascade_delete(HierarchyLevel.TOTAL_CLASS, 200, 110, False)

        assert db.get(TotalClass, 200) is not None
        assert db.get(SubClass, 2000).total_class_id == 200
        assert count(db, SubClass) == 4

    def test_total_class_name_clash_in_target_is_a_conflict(self, scenario, cascade):
        db = scenario
        db.get(TotalClass, 200).total_class_name = "CS2025级1班"
        db.commit()

        with pytest.raises(ConflictError, match="CS2025级1班"):
            cascade.cascade_delete(HierarchyLevel.MAJOR, 20, 10, False)

        assert db.get(Major, 20) is not None
        assert db.get(TotalClass, 200).major_id == 20


class TestValidation:

    def test_unknown_source(self, scenario, cascade):
        with pytest.raises(NotFoundError, match="学院不存在"):
            cascade.cascade_delete(HierarchyLevel.ACADEMY, 404, None, True)

    def test_unsupported_level(self, scenario, cascade):
        with pytest.raises(InvalidArgumentError, match="不支持的操作类型"):
            cascade.cascade_delete("STUDENT", 10000, None, True)

    def test_level_string_is_case_insensitive(self, scenario, cascade):
        cascade.cascade_delete("total_class", 100, None, True)
        assert scenario.get(TotalClass, 100) is None


class TestAtomicity:

    def test_failure_midway_rolls_back_everything(self, scenario, cascade, store, monkeypatch):
        original_delete = store.delete

        def failing_delete(node):
            if isinstance(node, Major):
                raise RuntimeError("disk full")
            original_delete(node)

        monkeypatch.setattr(store, "delete", failing_delete)

        with pytest.raises(RuntimeError):
            cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, None, True)

        db = scenario
        # 大班、小班、学生已在失败前被删除，回滚后应全部恢复
        assert db.get(Student, 10000) is not None
        assert db.get(SubClass, 1000) is not None
        assert db.get(TotalClass, 100) is not None
        assert db.get(Academy, 1) is not None
        assert count(db, Student) == 4


class TestAcademySubjects:

    def test_force_delete_with_subjects(self, subjects, cascade):
        cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, None, True, cascade_subjects=True)

        names = {(s.subject_academy, s.subject_name) for s in subjects.query(Subject).all()}
        assert names == {("Science", "高等数学"), ("Science", "力学")}

    def test_migrate_delete_with_subjects(self, subjects, cascade):
        cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, 2, False, cascade_subjects=True)

        db = subjects
        assert db.get(Subject, 1) is None  # 与理学院的高等数学重名
        assert db.get(Subject, 2).subject_academy == "Science"
        assert db.get(Major, 10).academy_id == 2

    def test_subjects_untouched_by_default(self, subjects, cascade):
        cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, None, True)

        assert count(subjects, Subject) == 4

    def test_unknown_target_with_subjects_is_rejected(self, subjects, cascade):
        with pytest.raises(InvalidArgumentError, match="目标学院不存在"):
            cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, 999, False, cascade_subjects=True)
        assert count(subjects, Subject) == 4

    def test_target_equal_to_source_with_subjects_is_rejected(self, subjects, cascade, monkeypatch):
        calls = []
        monkeypatch.setattr(
            cascade.subject_service, "reconcile_academy_subjects",
            lambda *args: calls.append(args),
        )

        with pytest.raises(InvalidArgumentError, match="不能与源学院相同"):
            cascade.cascade_delete(HierarchyLevel.ACADEMY, 1, 1, False, cascade_subjects=True)

        assert calls == []
        assert count(subjects, Subject) == 4
