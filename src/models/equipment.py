from datetime import datetime, timezone
from src.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Client(db.Model):
    """Modelo para o cliente atendido (único por instalação)"""
    __tablename__ = "client"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(255))
    contact_person = db.Column(db.String(120))
    phone = db.Column(db.String(50))
    email = db.Column(db.String(120))
    image_url = db.Column(db.Text)
    floor_plan_url = db.Column(db.Text)
    cover_image_url = db.Column(db.Text)

    def to_dict(self):
        return {
            "name": self.name,
            "address": self.address,
            "contactPerson": self.contact_person,
            "phone": self.phone,
            "email": self.email,
            "imageUrl": self.image_url,
            "floorPlanUrl": self.floor_plan_url,
            "coverImageUrl": self.cover_image_url,
        }

    def __repr__(self):
        return f"<Client {self.id}: {self.name}>"


class EquipmentCategory(db.Model):
    """Modelo para categorias de equipamento (extintores, alarmes, hidrantes...)"""
    __tablename__ = "equipment_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    # Nome em minúsculas: garante unicidade sem diferenciar maiúsculas no próprio banco
    name_key = db.Column(db.String(120), unique=True, nullable=False)
    icon = db.Column(db.String(60), nullable=False)

    # Relacionamentos
    items = db.relationship(
        "Equipment",
        backref="category",
        lazy=True,
        order_by="Equipment.position",
    )

    def to_dict(self):
        return {
            "name": self.name,
            "icon": self.icon,
            "items": [item.to_dict() for item in self.items],
        }

    def __repr__(self):
        return f"<EquipmentCategory {self.id}: {self.name}>"


class Equipment(db.Model):
    """Modelo para equipamentos de segurança contra incêndio"""
    __tablename__ = "equipment"

    id = db.Column(db.String(80), primary_key=True)
    location = db.Column(db.String(255), nullable=False)
    last_inspected = db.Column(db.String(10), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="ok")
    category_id = db.Column(db.Integer, db.ForeignKey("equipment_categories.id"), nullable=False)
    # Ordem de inserção dentro da categoria
    position = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "location": self.location,
            "lastInspected": self.last_inspected,
            "status": self.status,
        }

    def __repr__(self):
        return f"<Equipment {self.id}: {self.status}>"


class InspectionRecord(db.Model):
    """Modelo para vistorias realizadas (somente inclusão)"""
    __tablename__ = "inspection_history"

    id = db.Column(db.String(40), primary_key=True)
    inspection_date = db.Column(db.String(40), nullable=False)
    # Sem chave estrangeira: o histórico permanece após a exclusão do equipamento
    equipment_id = db.Column(db.String(80), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False)
    checklist_items = db.Column(db.JSON, nullable=False)
    evidence_photo = db.Column(db.Text)
    observations = db.Column(db.Text)
    general_observations = db.Column(db.Text)
    technician_id = db.Column(db.String(60))
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "inspectionDate": self.inspection_date,
            "equipmentId": self.equipment_id,
            "status": self.status,
            "checklistItems": self.checklist_items,
            "evidencePhoto": self.evidence_photo,
            "observations": self.observations,
            "generalObservations": self.general_observations,
            "technicianId": self.technician_id,
        }

    def __repr__(self):
        return f"<InspectionRecord {self.id} for Equipment {self.equipment_id}: {self.status}>"


class AppState(db.Model):
    """Demais seções do agregado (agenda, perfil, configurações...) em JSON"""
    __tablename__ = "app_state"

    key = db.Column(db.String(60), primary_key=True)
    value = db.Column(db.JSON, nullable=False)

    def __repr__(self):
        return f"<AppState {self.key}>"


class AppDocument(db.Model):
    """Agregado completo em um único documento versionado"""
    __tablename__ = "app_documents"

    id = db.Column(db.String(60), primary_key=True)
    version = db.Column(db.Integer, nullable=False, default=1)
    data = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<AppDocument {self.id} v{self.version}>"
