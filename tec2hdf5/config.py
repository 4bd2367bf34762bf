from configparser import RawConfigParser, ConfigParser, ExtendedInterpolation
import os
from importlib import resources
from io import StringIO


class Tec2Hdf5ConfigParser:
    """
    Config options for the conversion tools, layered from several sources.

    Options come from the package's ``default.cfg``, from other config files
    and from :py:meth:`set`.  Each source is kept separately and the layers
    are only combined when an option is requested.  User layers (files added
    with :py:meth:`add_user_config` and values set with ``user=True``) always
    win over the others, whatever order the layers were added in.

    Attributes
    ----------
    combined : {None, configparser.ConfigParser}
        The combined config options, ``None`` until they are first needed

    sources : {None, dict}
        The source (file path or ``<set>``) of each ``(section, option)``
        pair in ``combined``
    """

    def __init__(self):
        self._configs = dict()
        self._user_config = dict()
        self.combined = None
        self.sources = None

    @classmethod
    def from_defaults(cls, user_config=None):
        """
        Make a config parser with the options in the package's
        ``default.cfg`` and, optionally, a user config file on top

        Parameters
        ----------
        user_config : str, optional
            The path to a user config file, typically from the ``--config``
            command-line flag

        Returns
        -------
        config : tec2hdf5.config.Tec2Hdf5ConfigParser
            The config parser
        """
        config = cls()
        config.add_from_package('tec2hdf5', 'default.cfg')
        if user_config is not None:
            config.add_user_config(user_config)
        return config

    def add_user_config(self, filename):
        """ Add a config file whose options override all other layers """
        self._add(filename, user=True)

    def add_from_file(self, filename):
        """ Add a config file as an ordinary (non-user) layer """
        self._add(filename, user=False)

    def add_from_package(self, package, config_filename, exception=True):
        """
        Add a config file that is installed as data of a python package

        Parameters
        ----------
        package : str
            The package where ``config_filename`` is found

        config_filename : str
            The name of the config file to add

        exception : bool, optional
            Whether to raise an exception if the package or config file
            isn't found
        """
        try:
            resource = resources.files(package) / config_filename
            with resources.as_file(resource) as path:
                self._add(path, user=False)
        except (ModuleNotFoundError, FileNotFoundError, TypeError):
            if exception:
                raise

    def get(self, section, option):
        """ Get the value of an option as a string """
        return self._get_combined().get(section, option)

    def getint(self, section, option):
        """ Get the value of an option as an integer """
        return self._get_combined().getint(section, option)

    def getfloat(self, section, option):
        """ Get the value of an option as a float """
        return self._get_combined().getfloat(section, option)

    def getboolean(self, section, option):
        """ Get the value of an option as a boolean """
        return self._get_combined().getboolean(section, option)

    def getlist(self, section, option, dtype=str):
        """
        Get the value of an option as a list, with entries separated by
        commas and/or whitespace

        Parameters
        ----------
        section : str
            The name of the config section

        option : str
            The name of the config option

        dtype : {Type[str], Type[int], Type[float]}, optional
            The type of each entry

        Returns
        -------
        values : list
            The entries of the option
        """
        value = self.get(section, option)
        return [dtype(entry) for entry in value.replace(',', ' ').split()]

    def has_option(self, section, option):
        """ Whether any layer defines the option in the section """
        return self._get_combined().has_option(section, option)

    def set(self, section, option, value, user=True):
        """
        Set the value of an option, e.g. from a command-line flag

        Parameters
        ----------
        section : str
            The name of the config section

        option : str
            The name of the config option

        value : object
            The value, stored as its string representation

        user : bool, optional
            Whether the value goes in the user layer, overriding config
            files, rather than in the ordinary layer
        """
        layers = self._user_config if user else self._configs
        config = layers.setdefault('<set>', RawConfigParser())
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, option.lower(), str(value))
        self._invalidate()

    def write(self, fp, include_sources=True):
        """
        Write the combined options in config-file syntax

        Parameters
        ----------
        fp : typing.TextIO
            The file pointer to write to

        include_sources : bool, optional
            Whether to add a comment above each option naming the layer it
            came from
        """
        combined = self._get_combined()
        for section in combined.sections():
            fp.write(f'[{section}]\n\n')
            for option, value in combined.items(section=section, raw=True):
                if include_sources:
                    fp.write(f'# source: {self.sources[(section, option)]}\n')
                value = str(value).replace('\n', '\n\t')
                fp.write(f'{option} = {value}\n\n')
            fp.write('\n')

    def list_files(self):
        """ The sources of all layers, ordinary layers first """
        return list(self._configs.keys()) + list(self._user_config.keys())

    def copy(self):
        """
        Get a deep copy of the config parser, whose layers can be changed
        without affecting this one

        Returns
        -------
        config_copy : tec2hdf5.config.Tec2Hdf5ConfigParser
            The copy
        """
        config_copy = Tec2Hdf5ConfigParser()
        for source, config in self._configs.items():
            config_copy._configs[source] = _copy_layer(config)
        for source, config in self._user_config.items():
            config_copy._user_config[source] = _copy_layer(config)
        return config_copy

    def combine(self):
        """
        Combine the layers into ``combined``, recording the source of each
        option in ``sources``.  This happens automatically on first access.
        """
        self.combined = ConfigParser(interpolation=ExtendedInterpolation())
        self.sources = dict()
        for layers in [self._configs, self._user_config]:
            for source, config in layers.items():
                for section in config.sections():
                    if not self.combined.has_section(section):
                        self.combined.add_section(section)
                    for option, value in config.items(section):
                        self.sources[(section, option)] = source
                        self.combined.set(section, option, value)

    def _get_combined(self):
        if self.combined is None:
            self.combine()
        return self.combined

    def _invalidate(self):
        self.combined = None
        self.sources = None

    def _add(self, filename, user):
        filename = os.path.abspath(filename)
        if not os.path.exists(filename):
            raise FileNotFoundError(f'Config file does not exist: {filename}')
        config = RawConfigParser()
        config.read(filenames=filename)

        if user:
            self._user_config[filename] = config
        else:
            self._configs[filename] = config
        self._invalidate()


def _copy_layer(config):
    """ Copy one layer by writing it out and reading it back """
    buffer = StringIO()
    config.write(buffer)
    buffer.seek(0)
    layer = RawConfigParser()
    layer.read_file(buffer)
    return layer
