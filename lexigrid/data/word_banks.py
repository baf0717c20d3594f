"""Bundled Spanish vocabulary used by the demo CLI and the tests."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from ..core.models import Word


SAMPLE_VOCABULARY: Dict[str, List[tuple]] = {
    "casa": [
        ("MESA", "Table"),
        ("SILLA", "Chair"),
        ("VENTANA", "Window"),
        ("PUERTA", "Door"),
        ("COCINA", "Kitchen"),
        ("CAMA", "Bed"),
        ("ESPEJO", "Mirror"),
        ("LAMPARA", "Lamp"),
        ("ALFOMBRA", "Rug"),
        ("ARMARIO", "Wardrobe"),
        ("TECHO", "Ceiling"),
        ("JARDIN", "Garden"),
    ],
    "comida": [
        ("MANZANA", "Apple"),
        ("NARANJA", "Orange"),
        ("PLATANO", "Banana"),
        ("PAN", "Bread"),
        ("QUESO", "Cheese"),
        ("LECHE", "Milk"),
        ("POLLO", "Chicken"),
        ("ARROZ", "Rice"),
        ("TOMATE", "Tomato"),
        ("CEBOLLA", "Onion"),
        ("AZUCAR", "Sugar"),
        ("HUEVO", "Egg"),
    ],
    "naturaleza": [
        ("ARBOL", "Tree"),
        ("MONTAÑA", "Mountain"),
        ("RIO", "River"),
        ("PLAYA", "Beach"),
        ("BOSQUE", "Forest"),
        ("NUBE", "Cloud"),
        ("ESTRELLA", "Star"),
        ("LUNA", "Moon"),
        ("FLOR", "Flower"),
        ("PIEDRA", "Stone"),
        ("LAGO", "Lake"),
        ("VIENTO", "Wind"),
    ],
    "ciudad": [
        ("CALLE", "Street"),
        ("PLAZA", "Square"),
        ("MERCADO", "Market"),
        ("BIBLIOTECA", "Library"),
        ("HOSPITAL", "Hospital"),
        ("ESCUELA", "School"),
        ("PARQUE", "Park"),
        ("ESTACION", "Station"),
        ("MUSEO", "Museum"),
        ("IGLESIA", "Church"),
        ("PUENTE", "Bridge"),
        ("TIENDA", "Shop"),
    ],
    "cuerpo": [
        ("CABEZA", "Head"),
        ("CORAZÓN", "Heart"),
        ("MANO", "Hand"),
        ("PIERNA", "Leg"),
        ("BRAZO", "Arm"),
        ("OREJA", "Ear"),
        ("NARIZ", "Nose"),
        ("BOCA", "Mouth"),
        ("ESPALDA", "Back"),
        ("RODILLA", "Knee"),
        ("HOMBRO", "Shoulder"),
        ("DIENTE", "Tooth"),
    ],
}


def all_sample_words() -> List[Word]:
    words: List[Word] = []
    for topic, entries in SAMPLE_VOCABULARY.items():
        for index, (term, clue) in enumerate(entries, start=1):
            words.append(Word(id=f"{topic}-{index}", term=term, clue=clue))
    return words


def sample_words(count: Optional[int] = None, seed: Optional[int] = None) -> List[Word]:
    """Return ``count`` bundled words, drawn with ``seed`` when given."""

    words = all_sample_words()
    if count is None or count >= len(words):
        return words
    if count <= 0:
        return []
    return random.Random(seed).sample(words, count)
