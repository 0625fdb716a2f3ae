"""
Teacher Model - 教师模型（仅用于辅导员查询）
"""
from sqlalchemy import Column, Integer, String
from stumanage.core.database import Base


class Teacher(Base):
    """教师表"""
    __tablename__ = "teacher_table"
    
    teacher_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    teacher_name = Column(String(50), nullable=False, comment="教师姓名")
    teacher_no = Column(String(50), nullable=False, unique=True, comment="工号")
    department = Column(String(100), nullable=True, comment="所属部门")
    title = Column(String(50), nullable=True, comment="职称")
    
    def __repr__(self):
        return f"<Teacher(id={self.teacher_id}, name={self.teacher_name})>"
