"""
Academy Model - 学院模型
层级结构的顶层：学院 → 专业 → 大班 → 小班 → 学生
"""
from sqlalchemy import Column, Integer, String
from stumanage.core.database import Base


class Academy(Base):
    """学院表"""
    __tablename__ = "academy_table"
    
    academy_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    academy_name = Column(String(100), nullable=False, unique=True, comment="学院名称")
    academy_code = Column(String(50), nullable=True, unique=True, comment="学院代码，如：CS、EE")
    description = Column(String(500), nullable=True, comment="学院描述")
    dean_name = Column(String(50), nullable=True, comment="院长姓名")
    contact_phone = Column(String(50), nullable=True, comment="联系电话")
    address = Column(String(255), nullable=True, comment="学院地址")
    
    def __repr__(self):
        return f"<Academy(id={self.academy_id}, name={self.academy_name})>"
    
    def to_dict(self):
        return {
            "academy_id": self.academy_id,
            "academy_name": self.academy_name,
            "academy_code": self.academy_code,
            "description": self.description,
            "dean_name": self.dean_name,
            "contact_phone": self.contact_phone,
            "address": self.address,
        }
