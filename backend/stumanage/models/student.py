"""
Student Model - 学生模型
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from stumanage.core.database import Base


class Student(Base):
    """学生表"""
    __tablename__ = "stu_table"
    
    stu_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    stu_name = Column(String(50), nullable=False, comment="学生姓名")
    stu_gender = Column(Boolean, nullable=True, comment="性别")
    stu_major = Column(String(100), nullable=True, comment="专业名称（冗余字段）")
    # 迁移过程中允许为空
    class_id = Column(Integer, ForeignKey("sub_class_table.sub_class_id"), nullable=True, index=True, comment="所属小班")
    grade = Column("stu_grade", Integer, nullable=True, comment="年级")
    stu_tel = Column("stu_telephone_no", String(50), nullable=True, comment="联系电话")
    stu_address = Column(String(255), nullable=True, comment="家庭住址")
    
    def __repr__(self):
        return f"<Student(id={self.stu_id}, name={self.stu_name})>"
    
    def to_dict(self):
        return {
            "stu_id": self.stu_id,
            "stu_name": self.stu_name,
            "stu_gender": self.stu_gender,
            "stu_major": self.stu_major,
            "class_id": self.class_id,
            "grade": self.grade,
            "stu_tel": self.stu_tel,
            "stu_address": self.stu_address,
        }
