"""container-feeder: import container images shipped as RPMs into a local engine"""

__version__ = "0.1.0"
