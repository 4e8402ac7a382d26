import sys
from pathlib import Path

# Go up to the parent directory (..), then down into "scripts"
# This adds "../scripts" to the python search path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "scripts"))

# Now run_problem is directly visible to Python
from run_problem import run

problem = "harmonic_oscillator"
method = "improved_euler"  # euler or improved_euler

run(
    problem_name=problem,
    method=method,
    dt=1e-2,
    plot_path=f"data/computations/{problem}_{method}.png",
    output_path=f"data/computations/{problem}_{method}.npz",
    verbose=True,
)
