import os
import json

base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
default_materials = os.path.join(base_dir, 'data', 'materials.json')

class Materials:
    @staticmethod
    def load(category: str, name: str, materials_file: str = default_materials) -> dict:
        """Look up the entry called `name` in the `category` list ('substances' or 'elements')."""
        with open(materials_file, 'r') as f:
            materials = json.load(f)[category]
        try:
            return next(m for m in materials if m['name'] == name)
        except StopIteration:
            raise KeyError(f"No {category[:-1]} called '{name}' in {materials_file}")
