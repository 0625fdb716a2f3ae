"""
Cascade Schemas - 级联操作请求/响应 Pydantic 模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class CascadeDeleteRequest(BaseModel):
    """级联删除请求"""
    operation_type: str = Field(..., description="操作类型：ACADEMY, MAJOR, TOTAL_CLASS, SUB_CLASS")
    source_id: int = Field(..., description="源ID")
    target_id: Optional[int] = Field(None, description="目标ID（用于数据迁移）")
    force_delete: bool = Field(False, description="是否强制删除")
    cascade_subjects: bool = Field(False, description="删除学院时是否同时处理其课程")


class BatchCreateRequest(BaseModel):
    """批量创建专业和班级请求"""
    academy_id: int
    grade: int
    major_names: List[str]
    class_count_per_major: int = Field(1, ge=0, description="每个专业的大班数量")
    sub_class_count_per_total_class: int = Field(1, ge=0, description="每个大班的小班数量")


class StudentMigrationRequest(BaseModel):
    """学生迁移请求"""
    student_ids: List[int]
    target_sub_class_id: int


class UpdateItem(BaseModel):
    """批量更新中的单项"""
    id: int = Field(..., description="实体ID")
    name: Optional[str] = Field(None, description="新名称")
    parent_id: Optional[int] = Field(None, description="新的父级ID")
    description: Optional[str] = None
    additional_fields: Optional[Dict[str, Any]] = Field(None, description="其他字段")


class BatchUpdateRequest(BaseModel):
    """批量更新请求"""
    update_type: str = Field(..., description="更新类型：ACADEMY, MAJOR, TOTAL_CLASS, SUB_CLASS")
    updates: List[UpdateItem] = []


class SubClassInfo(BaseModel):
    sub_class_id: int
    sub_class_name: str
    student_count: int = 0


class TotalClassInfo(BaseModel):
    total_class_id: int
    total_class_name: str
    sub_classes: List[SubClassInfo] = []


class MajorInfo(BaseModel):
    major_id: int
    major_name: str
    grade: Optional[int] = None
    total_classes: List[TotalClassInfo] = []


class HierarchyStructure(BaseModel):
    """学院-专业-大班-小班 层级结构"""
    academy_id: int
    academy_name: str
    majors: List[MajorInfo] = []


class DeletePreview(BaseModel):
    """删除预览"""
    operation_type: str
    source_id: int
    source_name: Optional[str] = None
    affected_records: int = 0
    affected_items: List[str] = []
    can_delete: bool = False
    warning_message: Optional[str] = None


class ConsistencyCheckResult(BaseModel):
    """一致性检查结果"""
    errors: List[str] = []
    warnings: List[str] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class AcademySubjectsDeleteRequest(BaseModel):
    """删除学院时处理课程"""
    academy_id: int
    target_academy_id: Optional[int] = None


class SubjectAcademyUpdateRequest(BaseModel):
    subject_ids: List[int]
    new_academy: str


class SubjectCreditUpdateRequest(BaseModel):
    subject_ids: List[int]
    new_credit: float


class AcademyStatisticsResponse(BaseModel):
    """学院统计信息"""
    academy_name: str
    major_count: int = 0
    total_class_count: int = 0
    sub_class_count: int = 0
    student_count: int = 0
    subject_count: int = 0
    total_credits: float = 0.0
    credits: List[float] = []


class OperationResponse(BaseModel):
    """操作结果"""
    status: str = "success"
    message: str
