from .base import Benchmark
from .branin import BraninBenchmark
from .rastrigin import RastriginBenchmark
from .rosenbrock import RosenbrockBenchmark
from .sphere import SphereBenchmark
