"""
Cascade API Endpoints - 级联管理接口

1. 级联删除 - 支持数据迁移和强制删除
2. 批量创建 - 批量创建专业和班级结构
3. 学生迁移
4. 一致性检查
5. 层级结构查询与删除预览
6. 学院课程联动
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stumanage.core.database import get_db
from stumanage.crud.hierarchy import HierarchyStore
from stumanage.crud.subject import SubjectStore
from stumanage.models.hierarchy_level import HierarchyLevel
from stumanage.schemas.cascade import (
    AcademyStatisticsResponse,
    AcademySubjectsDeleteRequest,
    BatchCreateRequest,
    BatchUpdateRequest,
    CascadeDeleteRequest,
    ConsistencyCheckResult,
    DeletePreview,
    HierarchyStructure,
    OperationResponse,
    StudentMigrationRequest,
    SubjectAcademyUpdateRequest,
    SubjectCreditUpdateRequest,
)
from stumanage.services.batch_update_service import BatchUpdateApplicator
from stumanage.services.cascade_service import CascadeService
from stumanage.services.consistency_service import ConsistencyAuditor
from stumanage.services.subject_service import SubjectService

router = APIRouter(tags=["cascade"])


def get_subject_service(db: Session = Depends(get_db)) -> SubjectService:
    return SubjectService(HierarchyStore(db), SubjectStore(db))


def get_cascade_service(db: Session = Depends(get_db)) -> CascadeService:
    store = HierarchyStore(db)
    return CascadeService(store, SubjectService(store, SubjectStore(db)))


def get_auditor(db: Session = Depends(get_db)) -> ConsistencyAuditor:
    return ConsistencyAuditor(HierarchyStore(db))


def get_batch_updater(db: Session = Depends(get_db)) -> BatchUpdateApplicator:
    return BatchUpdateApplicator(HierarchyStore(db))


@router.post("/delete", response_model=OperationResponse)
def cascade_delete(
    request: CascadeDeleteRequest,
    service: CascadeService = Depends(get_cascade_service)
):
    """
    级联删除操作

    - force_delete=true：递归删除所有下级数据
    - 否则必须提供 target_id，直接下级迁移到目标节点
    """
    level = HierarchyLevel.parse(request.operation_type)
    removed = service.cascade_delete(
        level,
        request.source_id,
        request.target_id,
        request.force_delete,
        cascade_subjects=request.cascade_subjects,
    )
    return {"status": "success", "message": f"{level.label}级联删除成功，共删除 {removed} 条记录"}


@router.post("/batch-create", response_model=OperationResponse)
def batch_create(
    request: BatchCreateRequest,
    service: CascadeService = Depends(get_cascade_service)
):
    """
    批量创建专业和班级（已存在的专业跳过）
    """
    created = service.batch_create_subtree(
        request.academy_id,
        request.grade,
        request.major_names,
        request.class_count_per_major,
        request.sub_class_count_per_total_class,
    )
    return {"status": "success", "message": f"批量创建成功，新建专业 {created} 个"}


@router.post("/migrate-students", response_model=OperationResponse)
def migrate_students(
    request: StudentMigrationRequest,
    service: CascadeService = Depends(get_cascade_service)
):
    """
    学生迁移
    """
    moved = service.migrate_students(request.student_ids, request.target_sub_class_id)
    return {"status": "success", "message": f"学生迁移成功，共迁移 {moved} 人"}


@router.get("/consistency-check", response_model=ConsistencyCheckResult)
def check_consistency(auditor: ConsistencyAuditor = Depends(get_auditor)):
    """
    数据一致性检查
    """
    return auditor.check_consistency()


@router.get("/hierarchy", response_model=List[HierarchyStructure])
def get_hierarchy(
    academy_id: Optional[int] = Query(None, description="学院ID，不指定则返回所有学院"),
    service: CascadeService = Depends(get_cascade_service)
):
    """
    获取 学院-专业-大班-小班 完整层级结构
    """
    return service.get_hierarchy_structure(academy_id)


@router.get("/delete-preview", response_model=DeletePreview)
def get_delete_preview(
    operation_type: str = Query(..., description="操作类型"),
    source_id: int = Query(..., description="源ID"),
    service: CascadeService = Depends(get_cascade_service)
):
    """
    获取级联删除预览（不做任何修改）
    """
    return service.get_delete_preview(operation_type, source_id)


@router.post("/batch-update", response_model=OperationResponse)
def batch_update(
    request: BatchUpdateRequest,
    updater: BatchUpdateApplicator = Depends(get_batch_updater)
):
    """
    批量更新（改名、调整父级、附加字段）
    """
    updated = updater.batch_update(request.update_type, request.updates)
    return {"status": "success", "message": f"批量更新成功，共更新 {updated} 项"}


@router.post("/academy-subjects/delete", response_model=OperationResponse)
def delete_academy_subjects(
    request: AcademySubjectsDeleteRequest,
    service: SubjectService = Depends(get_subject_service)
):
    """
    删除学院时处理课程：迁移到目标学院或全部删除
    """
    handled = service.cascade_delete_academy_subjects(request.academy_id, request.target_academy_id)
    return {"status": "success", "message": f"学院课程处理完成，共 {handled} 门"}


@router.get("/subjects/validate")
def validate_subjects(service: SubjectService = Depends(get_subject_service)):
    """
    验证课程数据完整性
    """
    errors = service.validate_subject_data_integrity()
    return {
        "total": len(errors),
        "errors": errors
    }


@router.post("/subjects/batch-academy", response_model=OperationResponse)
def batch_update_subject_academy(
    request: SubjectAcademyUpdateRequest,
    service: SubjectService = Depends(get_subject_service)
):
    updated = service.batch_update_subject_academy(request.subject_ids, request.new_academy)
    return {"status": "success", "message": f"课程学院更新成功，共 {updated} 门"}


@router.post("/subjects/batch-credit", response_model=OperationResponse)
def batch_update_subject_credit(
    request: SubjectCreditUpdateRequest,
    service: SubjectService = Depends(get_subject_service)
):
    updated = service.batch_update_subject_credit(request.subject_ids, request.new_credit)
    return {"status": "success", "message": f"课程学分更新成功，共 {updated} 门"}


@router.get("/academy-statistics", response_model=AcademyStatisticsResponse)
def get_academy_statistics(
    academy_name: str = Query(..., description="学院名称"),
    service: SubjectService = Depends(get_subject_service)
):
    """
    学院课程与层级统计
    """
    return service.get_academy_statistics(academy_name)
