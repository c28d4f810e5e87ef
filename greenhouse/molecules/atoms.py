import itertools
from enum import Enum

import numpy as np

from ..models.materials import Materials

_atom_ids = itertools.count()


class Element(Enum):
    CARBON = 'carbon'
    HYDROGEN = 'hydrogen'
    NITROGEN = 'nitrogen'
    OXYGEN = 'oxygen'

    def load(self) -> dict:
        return Materials.load('elements', self.value)


class Atom:
    """
    One atom of a molecule. Radius in picometers, mass in atomic mass units.

    Only the position changes after creation; it is driven by the molecule the atom belongs to.
    """
    def __init__(self, element: Element, **kwargs):
        data = Element(element).load()
        self.element = Element(element)
        self.symbol = data['symbol']
        self.color = data['color']
        self.radius = float(data['radius'])
        self.mass = float(data['mass'])
        self.top_layer = False if 'top_layer' not in kwargs else bool(kwargs['top_layer'])
        self.position = np.zeros(2) if 'position' not in kwargs else np.array(kwargs['position'], dtype=np.float64)
        self.unique_id = next(_atom_ids)

    @staticmethod
    def carbon(**kwargs) -> 'Atom':
        return Atom(Element.CARBON, **kwargs)

    @staticmethod
    def hydrogen(**kwargs) -> 'Atom':
        return Atom(Element.HYDROGEN, **kwargs)

    @staticmethod
    def nitrogen(**kwargs) -> 'Atom':
        return Atom(Element.NITROGEN, **kwargs)

    @staticmethod
    def oxygen(**kwargs) -> 'Atom':
        return Atom(Element.OXYGEN, **kwargs)

    def __repr__(self):
        return f"Atom({self.symbol}, id={self.unique_id}, position={self.position.tolist()})"


class AtomicBond:
    """Bond between two atoms of the same molecule; the offsets shift where the bond meets each atom when drawn."""
    def __init__(self, atom1: Atom, atom2: Atom, bond_count: int = 1, **kwargs):
        if bond_count not in (1, 2, 3):
            raise ValueError(f"Bond count must be 1, 2 or 3; got {bond_count}")
        self.atom1 = atom1
        self.atom2 = atom2
        self.bond_count = bond_count
        self.top_layer = False if 'top_layer' not in kwargs else bool(kwargs['top_layer'])
        self.atom1_position_offset = np.zeros(2) if 'atom1_position_offset' not in kwargs \
            else np.array(kwargs['atom1_position_offset'], dtype=np.float64)
        self.atom2_position_offset = np.zeros(2) if 'atom2_position_offset' not in kwargs \
            else np.array(kwargs['atom2_position_offset'], dtype=np.float64)

    def __repr__(self):
        return f"AtomicBond({self.atom1.symbol}-{self.atom2.symbol}, bond_count={self.bond_count})"
