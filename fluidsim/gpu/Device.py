import torch


def get_device(device: torch.device | str | None = None) -> torch.device:
    """Resolve a torch device, preferring the first CUDA device when available."""
    if device is None:
        device = 'cuda:0' if torch.cuda.is_available() else 'cpu'
    return torch.device(device)
