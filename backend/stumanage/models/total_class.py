"""
TotalClass Model - 大班模型
"""
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from stumanage.core.database import Base


class TotalClass(Base):
    """大班表"""
    __tablename__ = "total_class_table"
    
    total_class_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    total_class_name = Column(String(100), nullable=False, comment="大班名称")
    major_id = Column(Integer, ForeignKey("major_table.major_id"), nullable=True, index=True, comment="所属专业")
    
    # 唯一约束：同一专业下大班名称唯一
    __table_args__ = (
        UniqueConstraint('major_id', 'total_class_name', name='uix_major_total_class_name'),
    )
    
    def __repr__(self):
        return f"<TotalClass(id={self.total_class_id}, name={self.total_class_name})>"
    
    def to_dict(self):
        return {
            "total_class_id": self.total_class_id,
            "total_class_name": self.total_class_name,
            "major_id": self.major_id,
        }
