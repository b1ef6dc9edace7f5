from PIL import Image as PIM
import io, os
import numpy as np

import matplotlib.pyplot as plt

def aget_ipython():
    try:
        import IPython
        return IPython;
    except ImportError:
        return None;

def runningInNotebook():
    ipyth = aget_ipython();
    if(ipyth is None):
        return False;
    shell = ipyth.get_ipython().__class__.__name__;
    if shell == 'ZMQInteractiveShell':
        return True   # Jupyter notebook or qtconsole
    return False      # terminal IPython or plain interpreter


_ISNOTEBOOK = runningInNotebook();

def is_notebook():
    return _ISNOTEBOOK;

class Image(object):
    """Image

    Wraps an (h, w, 3) array of samples. Float samples are treated as
    linear values in [0, 1] and are clamped, never gamma corrected, on
    the way to 8 bits.
    """

    def __init__(self, pixels):
        # samples are always linear floats; anything else is converted
        self.pixels = np.asarray(pixels, dtype=np.float32);

    @property
    def ipixels(self):
        """8 bit samples: clamp to [0,1], scale by 255, truncate."""
        return (np.clip(self.pixels, 0.0, 1.0) * 255).astype(np.uint8);

    @property
    def shape(self):
        return np.asarray(self.pixels.shape)[:];

    @property
    def width(self):
        return self.shape[1];

    @property
    def height(self):
        return self.shape[0];

    @classmethod
    def FromFramebuffer(cls, framebuffer, width, height):
        """Build an image from a flat, row-major sequence of width*height colors."""
        pix = np.asarray(framebuffer, dtype=np.float32);
        if (pix.shape != (width * height, 3)):
            raise ValueError("framebuffer holds {} samples, expected {}x{}x3".format(pix.shape, width, height));
        return cls(pixels=pix.reshape(height, width, 3));

    def PIL(self):
        return PIM.fromarray(self.ipixels);

    def encode(self, format='PPM'):
        """Return the encoded file contents as bytes."""
        f = io.BytesIO();
        self.PIL().save(f, format=format);
        return f.getvalue();

    def writeToFile(self, output_path=None, format=None, **kwargs):
        # encode everything before touching the destination, so a failure
        # never leaves a half written file behind
        if (format is None):
            ext = os.path.splitext(output_path)[1].lower();
            format = PIM.registered_extensions().get(ext, 'PPM');
        data = self.encode(format=format);
        with open(output_path, 'wb') as f:
            f.write(data);

    def show(self, title=None, new_figure=True, **kwargs):
        if (is_notebook()):
            Image.Show(self, new_figure=new_figure, title=title, **kwargs);
        else:
            self.PIL().show();

    @staticmethod
    def Show(im, title=None, new_figure=True, axis=None, **kwargs):
        if (isinstance(im, Image)):
            imdata = im.ipixels;
        else:
            imdata = Image(im).ipixels;

        if (new_figure):
            plt.figure(num=title);
        if (axis is not None):
            axis.imshow(imdata, **kwargs);
        else:
            plt.imshow(imdata, **kwargs);
        plt.axis('off');
        if (title):
            plt.title(title);
