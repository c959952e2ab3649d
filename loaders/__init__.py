from .model_loader import ModelLoader, load_model, analyze_file

__all__ = ['ModelLoader', 'load_model', 'analyze_file']
