"""
测试公共 fixture：内存 SQLite 数据库 + 示例层级数据
"""
import os

# 必须在导入 stumanage 之前设置，避免连接 MySQL
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stumanage.core.database import init_db
from stumanage.crud.hierarchy import HierarchyStore
from stumanage.crud.subject import SubjectStore
from stumanage.models.academy import Academy
from stumanage.models.major import Major
from stumanage.models.total_class import TotalClass
from stumanage.models.sub_class import SubClass
from stumanage.models.student import Student
from stumanage.models.subject import Subject
from stumanage.models.teacher import Teacher
from stumanage.services.batch_update_service import BatchUpdateApplicator
from stumanage.services.cascade_service import CascadeService
from stumanage.services.consistency_service import ConsistencyAuditor
from stumanage.services.subject_service import SubjectService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return HierarchyStore(db)


@pytest.fixture
def subject_service(db, store):
    return SubjectService(store, SubjectStore(db))


@pytest.fixture
def cascade(store, subject_service):
    return CascadeService(store, subject_service)


@pytest.fixture
def auditor(store):
    return ConsistencyAuditor(store)


@pytest.fixture
def updater(store):
    return BatchUpdateApplicator(store)


@pytest.fixture
def scenario(db):
    """
    工程学院(1)
      ├─ CS 2025 (10) ─ CS2025级1班 (100) ─ CS2025级1班-1 (1000) ─ Alice (10000)
      └─ EE 2025 (11) ─ EE2025级1班 (110) ─┬─ EE2025级1班-1 (1100) ─ Bob, Carol
                                           └─ EE2025级1班-2 (1101)
    理学院(2)
      └─ 物理 2025 (20) ─ 物理2025级1班 (200) ─ 物理2025级1班-1 (2000) ─ Dave
    """
    db.add_all([
        Academy(academy_id=1, academy_name="Engineering", academy_code="ENG"),
        Academy(academy_id=2, academy_name="Science", academy_code="SCI"),
        Teacher(teacher_id=7, teacher_name="王老师", teacher_no="T007"),
        Major(major_id=10, major_name="CS", academy_id=1, grade=2025),
        Major(major_id=11, major_name="EE", academy_id=1, grade=2025),
        Major(major_id=20, major_name="物理", academy_id=2, grade=2025),
        TotalClass(total_class_id=100, total_class_name="CS2025级1班", major_id=10),
        TotalClass(total_class_id=110, total_class_name="EE2025级1班", major_id=11),
        TotalClass(total_class_id=200, total_class_name="物理2025级1班", major_id=20),
        SubClass(sub_class_id=1000, sub_class_name="CS2025级1班-1", total_class_id=100),
        SubClass(sub_class_id=1100, sub_class_name="EE2025级1班-1", total_class_id=110),
        SubClass(sub_class_id=1101, sub_class_name="EE2025级1班-2", total_class_id=110),
        SubClass(sub_class_id=2000, sub_class_name="物理2025级1班-1", total_class_id=200),
        Student(stu_id=10000, stu_name="Alice", stu_major="CS", class_id=1000, grade=2025),
        Student(stu_id=11000, stu_name="Bob", stu_major="EE", class_id=1100, grade=2025),
        Student(stu_id=11001, stu_name="Carol", stu_major="EE", class_id=1100, grade=2025),
        Student(stu_id=20000, stu_name="Dave", stu_major="物理", class_id=2000, grade=2025),
    ])
    db.commit()
    return db


@pytest.fixture
def subjects(db, scenario):
    db.add_all([
        Subject(subject_id=1, subject_name="高等数学", subject_academy="Engineering", credit=5.0),
        Subject(subject_id=2, subject_name="电路原理", subject_academy="Engineering", credit=4.0),
        Subject(subject_id=3, subject_name="高等数学", subject_academy="Science", credit=5.0),
        Subject(subject_id=4, subject_name="力学", subject_academy="Science", credit=3.0),
    ])
    db.commit()
    return db


@pytest.fixture
def client(db):
    from main import app
    from stumanage.core.database import get_db

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def count(db, model) -> int:
    return db.query(model).count()
