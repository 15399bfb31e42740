from __future__ import annotations

from barbershop.domain.entities.service import Service, TieredPrice

DEFAULT_SERVICES: list[Service] = [
    Service(
        id="haircut",
        name="Corte de Cabelo",
        description="Corte profissional com lavagem e finalização",
        duration_minutes=30,
        price=40,
    ),
    Service(
        id="beard",
        name="Barba",
        description="Modelagem e acabamento da barba",
        duration_minutes=30,
        price=40,
    ),
    Service(
        id="eyebrows",
        name="Sobrancelha",
        description="Design e acabamento das sobrancelhas",
        duration_minutes=0,
        price=15,
    ),
    Service(
        id="carbonoplastia",
        name="Carbonoplastia",
        description="Tratamento capilar com carbono ativado",
        duration_minutes=60,
        sizes=TieredPrice(small=120, medium=140, large=160),
    ),
    Service(
        id="pigmentation",
        name="Pigmentação",
        description="Pigmentação capilar profissional",
        duration_minutes=30,
        price=50,
    ),
    Service(
        id="facial-cleaning",
        name="Limpeza Facial",
        description="Limpeza e tratamento facial completo",
        duration_minutes=30,
        price=50,
    ),
    Service(
        id="taninoplastia",
        name="Taninoplastia",
        description="Tratamento capilar com tanino",
        duration_minutes=60,
        sizes=TieredPrice(small=120, medium=140, large=160),
    ),
    Service(
        id="visagismo",
        name="Visagismo",
        description="Para consultoria visagista entre contato",
    ),
]
