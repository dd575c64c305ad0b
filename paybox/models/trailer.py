"""
Trailer / container logistics services and the lookup entities they reference.
"""
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text

from paybox.dates import utcnow
from paybox.database import Base


class LookupEntityModel(Base):
    """Clients, trailers (carretas), drivers and locations"""
    __tablename__ = "lookup_entities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String, nullable=False, index=True)  # client, trailer, driver, location
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)


def _lookup_fk():
    return Column(Integer, ForeignKey("lookup_entities.id"))


class TrailerServiceModel(Base):
    __tablename__ = "trailer_services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    service_date = Column(String, nullable=False)
    dispatch_guide = Column(String)
    carrier_guide = Column(String)
    plate = Column(String)
    trailer_id = _lookup_fk()
    client_id = _lookup_fk()
    sub_client_id = _lookup_fk()
    service_type = Column(String)
    cargo_type = Column(String)
    appointment_time = Column(String)
    reference = Column(String)
    container_size = Column(String)
    agency_id = _lookup_fk()
    pickup_warehouse_id = _lookup_fk()
    destination_id = _lookup_fk()
    container = Column(String)
    return_warehouse_id = _lookup_fk()
    driver_id = _lookup_fk()
    status = Column(String)
    empty_return = Column(String)
    return_driver_id = _lookup_fk()
    return_time = Column(String)

    # Milestones
    pickup_arrival = Column(String)
    pickup_departure = Column(String)
    client_arrival = Column(String)
    plant_entry = Column(String)
    loading_start = Column(String)
    unloading_end = Column(String)

    observations = Column(Text)

    # Costs
    yellow_line = Column(Float)
    tolls = Column(Float)
    extras = Column(Float)
    driver_pay = Column(Float)

    invoice = Column(String)
    invoice_status = Column(String)

    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
