from .loaders import parameters_from_dict, load_parameters, save_parameters

__all__ = ['parameters_from_dict', 'load_parameters', 'save_parameters']
