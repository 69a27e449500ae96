from sqlalchemy import Column, Integer, Numeric, String, Text

from .database import Base


class LocationDetail(Base):
    """Dealership site; `cmf` is the dealer's numeric location id."""
    __tablename__ = "location_detail"

    cmf = Column(Numeric, primary_key=True)
    location = Column(String, nullable=False, index=True)  # 3-letter code, e.g. 'SUT'
    storename = Column(String, nullable=True)

    address = Column(Text, nullable=True)  # single-line address ending with the zip
    address1 = Column(Text, nullable=True)
    address2 = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zipcode = Column(String, nullable=True)
    country = Column(String, nullable=True)

    # stored as text; not always numeric
    lat = Column(String, nullable=True)
    lon = Column(String, nullable=True)

    @property
    def cmf_id(self) -> int:
        return int(self.cmf)


class UnitClass(Base):
    """RV category (travel trailer, fifth wheel, ...)."""
    __tablename__ = "class"
    __table_args__ = {"schema": "unit"}

    class_id = Column(Integer, primary_key=True)
    class_ = Column("class", String, nullable=False)
    class_description = Column(Text, nullable=True)

    @property
    def to_schema(self):
        return {
            "class_id": self.class_id,
            "class": self.class_,
            "class_description": self.class_description,
        }
