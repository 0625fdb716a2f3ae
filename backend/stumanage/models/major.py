"""
Major Model - 专业模型
"""
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from stumanage.core.database import Base


class Major(Base):
    """专业表"""
    __tablename__ = "major_table"
    
    major_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    major_name = Column(String(100), nullable=False, comment="专业名称")
    academy_id = Column(Integer, ForeignKey("academy_table.academy_id"), nullable=True, index=True, comment="所属学院")
    grade = Column(Integer, nullable=True, comment="年级（入学年份）")
    counselor_id = Column(Integer, ForeignKey("teacher_table.teacher_id"), nullable=True, comment="辅导员")
    
    # 唯一约束：专业名称+年级
    __table_args__ = (
        UniqueConstraint('major_name', 'grade', name='uix_major_name_grade'),
    )
    
    def __repr__(self):
        return f"<Major(id={self.major_id}, name={self.major_name}, grade={self.grade})>"
    
    def to_dict(self):
        return {
            "major_id": self.major_id,
            "major_name": self.major_name,
            "academy_id": self.academy_id,
            "grade": self.grade,
            "counselor_id": self.counselor_id,
        }
