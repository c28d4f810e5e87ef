import matplotlib.patches
import matplotlib.pyplot as plt
import numpy as np

from .constants import kelvin_to_celsius
from .simulation import Simulation
from .molecules import Molecule


class Plot:
    def __init__(self, plot_type, *args, **kwargs):
        if plot_type == 'none':
            self.func = self.nop
        elif plot_type == 'temperature':
            self.func = self.temperature
        elif plot_type == 'photons':
            self.func = self.photons
        elif plot_type == 'waves':
            self.func = self.waves
        elif plot_type == 'molecule':
            self.func = self.molecule
        else:
            raise ValueError(f"Unsupported plot type '{plot_type}'")
        self.func(*args, **kwargs)

    @staticmethod
    def temperature(sim: Simulation, celsius: bool = False):
        if sim.history is None or 'ground_temperature' not in sim.history:
            raise ValueError(f"No temperature history was recorded for the {sim.screen} screen")
        time = sim.history['time']
        ground = sim.history['ground_temperature']
        layers = sim.history['layer_temperatures']
        unit = 'ºC' if celsius else 'K'
        if celsius:
            ground = kelvin_to_celsius(ground)
            layers = kelvin_to_celsius(layers)

        plt.figure(figsize=(10, 6))
        plt.plot(time, ground, '-', label='Ground', color='saddlebrown', linewidth=2)
        for i_layer in range(layers.shape[1]):
            altitude = sim.model.atmosphere_layers[i_layer].altitude
            plt.plot(time, layers[:, i_layer], '--', label=f'Layer at {altitude / 1000:.1f} km')
        plt.xlabel('Time (s)')
        plt.ylabel(f'Temperature ({unit})')
        plt.title(f'Temperatures on the {sim.screen} screen')
        plt.legend()
        plt.tight_layout()
        plt.show()

    @staticmethod
    def photons(sim: Simulation):
        model = sim.model
        if not hasattr(model, 'photon_collection'):
            raise ValueError(f"The {sim.screen} screen has no photons to plot")
        visible = np.array([photon.position for photon in model.photon_collection.visible_photons]).reshape(-1, 2)
        infrared = np.array([photon.position for photon in model.photon_collection.infrared_photons]).reshape(-1, 2)

        fig, ax = plt.subplots(figsize=(8, 8))
        half_span = model.sunlight_span / 2
        ax.axhline(0.0, color='saddlebrown', linewidth=3)
        for layer in model.atmosphere_layers:
            ax.axhline(layer.altitude, color='gray', alpha=0.8 if layer.is_active else 0.2, linestyle='--')
        for cloud in model.clouds:
            if cloud.enabled:
                ax.add_patch(matplotlib.patches.Ellipse(cloud.position, cloud.width, cloud.height,
                                                        color='lightgray', alpha=0.6))
        ax.scatter(visible[:, 0], visible[:, 1], s=8, color='gold', label=f'Visible ({len(visible)})')
        ax.scatter(infrared[:, 0], infrared[:, 1], s=8, color='crimson', label=f'Infrared ({len(infrared)})')
        ax.set_xlim(-half_span, half_span)
        ax.set_ylim(0.0, model.height_of_atmosphere)
        ax.set_xlabel('x (m)')
        ax.set_ylabel('Altitude (m)')
        ax.set_title(f'Photons at t = {sim.time:.1f} s')
        ax.legend(loc='upper right')
        plt.tight_layout()
        plt.show()

    @staticmethod
    def waves(sim: Simulation):
        model = sim.model
        if not hasattr(model, 'waves'):
            raise ValueError(f"The {sim.screen} screen has no waves to plot")

        fig, ax = plt.subplots(figsize=(8, 8))
        ax.axhline(0.0, color='saddlebrown', linewidth=3)
        for wave in model.waves:
            start, end = wave.start_point, wave.end_point
            ax.plot([start[0], end[0]], [start[1], end[1]], color='gold' if wave.is_visible else 'crimson',
                    alpha=max(0.1, wave.intensity_at_start), linewidth=1 + 3 * wave.intensity_at_start)
        half_span = model.sunlight_span / 2
        ax.set_xlim(-half_span, half_span)
        ax.set_ylim(0.0, model.height_of_atmosphere)
        ax.set_xlabel('x (m)')
        ax.set_ylabel('Altitude (m)')
        ax.set_title(f'{len(model.waves)} waves at t = {sim.time:.1f} s')
        plt.tight_layout()
        plt.show()

    @staticmethod
    def molecule(sim: Simulation):
        model = sim.model
        if not hasattr(model, 'active_molecules'):
            raise ValueError(f"The {sim.screen} screen has no molecules to plot")

        fig, ax = plt.subplots(figsize=(8, 6))
        for molecule in model.active_molecules:
            Plot.draw_molecule(ax, molecule)
        for photon in model.photons:
            ax.plot(*photon.position, 'o', color='purple', markersize=4)
        ax.set_xlim(-1600, 1600)
        ax.set_ylim(-1100, 1100)
        ax.set_aspect('equal')
        ax.set_xlabel('x (pm)')
        ax.set_ylabel('y (pm)')
        names = ' + '.join(molecule.name for molecule in model.active_molecules)
        ax.set_title(f'{names} at t = {sim.time:.1f} s')
        plt.tight_layout()
        plt.show()

    @staticmethod
    def draw_molecule(ax, molecule: Molecule):
        # Bottom layer first, so that bonds and atoms flagged as top layer are drawn over the rest
        for top_layer in (False, True):
            for bond in molecule.atomic_bonds:
                if bond.top_layer != top_layer:
                    continue
                p1 = bond.atom1.position + bond.atom1_position_offset
                p2 = bond.atom2.position + bond.atom2_position_offset
                ax.plot([p1[0], p2[0]], [p1[1], p2[1]], color='dimgray', linewidth=2 * bond.bond_count,
                        zorder=1 + 2 * top_layer)
            for atom in molecule.atoms:
                if atom.top_layer != top_layer:
                    continue
                ax.add_patch(matplotlib.patches.Circle(atom.position, atom.radius, facecolor=atom.color,
                                                       edgecolor='black', zorder=2 + 2 * top_layer))

    @staticmethod
    def nop(*args, **kwargs):
        pass
