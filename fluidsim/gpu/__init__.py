
from .Device import get_device
from .Shader import Shader, FeedbackLoopError, draw_quad

# TEXTURE CLASSES
from .Texture import Texture, TextureFormat, AllocationError
from .Fbo import Fbo, SwapFbo, bound_target, release_target
