import logging
import sys

from greenhouse.config import SimulationConfig
from greenhouse.logging_config import setup_logging
from greenhouse.simulation import Simulation
from greenhouse.plot import Plot

logger = logging.getLogger("greenhouse.run")


def run(argv=None):
    argv = sys.argv if argv is None else argv
    plot_type = 'temperature'
    screen = 'layer_model'
    duration_sec = 60.0
    timestep_sec = 1 / 60
    time_between_snapshots_sec = 0.5
    config_file = None
    if len(argv) > 1:
        plot_type = argv[1]
    if len(argv) > 2:
        screen = argv[2]
    if len(argv) > 3:
        duration_sec = float(argv[3])
    if len(argv) > 4:
        timestep_sec = float(argv[4])
        time_between_snapshots_sec = timestep_sec
    if len(argv) > 5:
        time_between_snapshots_sec = float(argv[5])
    if len(argv) > 6:
        config_file = argv[6]
    if len(argv) > 7:
        raise TypeError(f"run() takes from 0 to 6 positional arguments but {len(argv) - 1} were given.")

    config = SimulationConfig() if config_file is None else SimulationConfig.from_json(config_file)
    sim = Simulation(plot_type, screen, config)
    sim.run(duration_sec, timestep_sec, time_between_snapshots_sec)

    Plot(plot_type, sim)
    return sim


if __name__ == '__main__':
    setup_logging()
    try:
        run()
    except Exception as err:
        logger.error(err)
        print(err, file=sys.stderr)
        sys.exit(1)
    sys.exit(0)
