
from .FlowUtil import FlowUtil

# Import ConfigBase from parent package
from ..ConfigBase import ConfigBase, config_field

__all__ = ['FlowUtil', 'ConfigBase', 'config_field']
