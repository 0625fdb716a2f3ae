"""
Subject CRUD Operations - 课程数据访问
课程通过学院名称字符串关联学院
"""
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from stumanage.core.database import atomic
from stumanage.models.subject import Subject


class SubjectStore:
    """课程数据访问类"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self):
        with atomic(self.db):
            yield self

    def find_all(self) -> List[Subject]:
        return self.db.query(Subject).order_by(Subject.subject_id).all()

    def find_by_id(self, subject_id: int) -> Optional[Subject]:
        return self.db.get(Subject, subject_id)

    def find_by_academy(self, academy_name: str) -> List[Subject]:
        """获取指定学院名称下的所有课程"""
        return self.db.query(Subject).filter(
            Subject.subject_academy == academy_name
        ).order_by(Subject.subject_id).all()

    def find_by_academy_and_name(self, academy_name: str, subject_name: str) -> Optional[Subject]:
        return self.db.query(Subject).filter(
            Subject.subject_academy == academy_name,
            Subject.subject_name == subject_name
        ).first()

    def count_by_academy(self, academy_name: str) -> int:
        return self.db.query(Subject).filter(Subject.subject_academy == academy_name).count()

    def sum_credit_by_academy(self, academy_name: str) -> float:
        """学院总学分，没有课程时为 0"""
        total = self.db.query(func.coalesce(func.sum(Subject.credit), 0)).filter(
            Subject.subject_academy == academy_name
        ).scalar()
        return float(total or 0)

    def find_credits_by_academy(self, academy_name: str) -> List[float]:
        """学院下出现过的所有学分值（去重、升序）"""
        results = self.db.query(distinct(Subject.credit)).filter(
            Subject.subject_academy == academy_name,
            Subject.credit.isnot(None)
        ).order_by(Subject.credit).all()
        return [r[0] for r in results]

    def find_all_academies(self) -> List[str]:
        """课程表中出现过的所有学院名称"""
        results = self.db.query(distinct(Subject.subject_academy)).filter(
            Subject.subject_academy.isnot(None)
        ).all()
        return sorted([r[0] for r in results])

    def save(self, subject: Subject) -> Subject:
        self.db.add(subject)
        self.db.flush()
        return subject

    def delete(self, subject: Subject) -> None:
        self.db.delete(subject)
        self.db.flush()

    def delete_all(self, subjects: List[Subject]) -> int:
        for subject in subjects:
            self.db.delete(subject)
        self.db.flush()
        return len(subjects)
