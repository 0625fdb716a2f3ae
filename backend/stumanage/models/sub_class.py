"""
SubClass Model - 小班模型
"""
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from stumanage.core.database import Base


class SubClass(Base):
    """小班表"""
    __tablename__ = "sub_class_table"
    
    sub_class_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sub_class_name = Column(String(100), nullable=False, comment="小班名称")
    total_class_id = Column(Integer, ForeignKey("total_class_table.total_class_id"), nullable=True, index=True, comment="所属大班")
    
    # 唯一约束：同一大班下小班名称唯一
    __table_args__ = (
        UniqueConstraint('total_class_id', 'sub_class_name', name='uix_total_class_sub_class_name'),
    )
    
    def __repr__(self):
        return f"<SubClass(id={self.sub_class_id}, name={self.sub_class_name})>"
    
    def to_dict(self):
        return {
            "sub_class_id": self.sub_class_id,
            "sub_class_name": self.sub_class_name,
            "total_class_id": self.total_class_id,
        }
