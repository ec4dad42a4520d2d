"""
lshkde system diagnostics and requirement checking.

Reports which dependencies are importable and which optional
acceleration paths the engines will take.
"""

from typing import Dict, List


def check_system_requirements(verbose: bool = True) -> Dict[str, bool]:
    """
    Check system requirements for lshkde.

    Parameters
    ----------
    verbose : bool, default True
        Whether to print detailed status information

    Returns
    -------
    Dict[str, bool]
        Dictionary mapping requirement names to availability status
    """
    if verbose:
        print("Checking lshkde system requirements...")

    requirements: Dict[str, bool] = {}
    versions: Dict[str, str] = {}

    for name in ("numpy", "scipy", "psutil", "tqdm", "jax"):
        try:
            module = __import__(name)
        except ImportError:
            requirements[name] = False
            continue
        requirements[name] = True
        versions[name] = getattr(module, "__version__", "unknown")

    from .jax_utils import JAX_AVAILABLE, get_devices
    from .config import get_config
    requirements['jax_acceleration'] = JAX_AVAILABLE and get_config().use_jax_jit

    if verbose:
        for name in ("numpy", "scipy", "psutil", "tqdm", "jax"):
            if requirements[name]:
                print(f"   OK  {name}: v{versions[name]}")
            else:
                print(f"   --  {name}: not available")
        if JAX_AVAILABLE:
            print(f"   JAX devices: {[str(d) for d in get_devices()]}")
        info = get_config().get_system_info()
        print(f"   CPUs: {info['cpu_count']}, memory: {info['system_memory_gb']:.1f} GB")

        missing = missing_requirements(requirements)
        if missing:
            print("\nCritical requirements not met:")
            for cmd in suggest_installation_commands(missing):
                print(f"   - {cmd}")
        else:
            print("All critical requirements met!")

    return requirements


def missing_requirements(requirements: Dict[str, bool]) -> List[str]:
    """Critical requirements that are not importable."""
    critical = ['numpy', 'scipy', 'psutil', 'tqdm']
    return [req for req in critical if not requirements.get(req, False)]


def suggest_installation_commands(missing: List[str]) -> List[str]:
    """
    Suggest pip install commands for missing requirements.

    Parameters
    ----------
    missing : List[str]
        List of missing requirement names

    Returns
    -------
    List[str]
        List of pip install commands
    """
    install_map = {
        'numpy': 'pip install numpy',
        'scipy': 'pip install scipy',
        'psutil': 'pip install psutil',
        'tqdm': 'pip install tqdm',
        'jax': 'pip install jax',
    }
    return [install_map[req] for req in missing if req in install_map]
