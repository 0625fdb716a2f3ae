"""
Subject Model - 课程模型

注意：课程通过学院名称字符串（subject_academy）关联学院，而不是外键。
"""
from sqlalchemy import Column, BigInteger, Integer, String, Float
from stumanage.core.database import Base


class Subject(Base):
    """课程表"""
    __tablename__ = "subject_table"
    
    subject_id = Column(BigInteger().with_variant(Integer(), "sqlite"), primary_key=True, index=True, autoincrement=True)
    subject_name = Column(String(100), nullable=False, comment="课程名称")
    subject_academy = Column(String(100), nullable=True, index=True, comment="开课学院名称")
    credit = Column(Float, nullable=True, comment="学分")
    
    def __repr__(self):
        return f"<Subject(id={self.subject_id}, name={self.subject_name}, academy={self.subject_academy})>"
    
    def to_dict(self):
        return {
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "subject_academy": self.subject_academy,
            "credit": self.credit,
        }
