import os


def get_test_data_file(filename):
    """
    Get the full path to a data file in the tests/data directory.

    Parameters
    ----------
    filename : str
        The name of the data file.

    Returns
    -------
    str
        The full path to the data file.
    """

    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data',
                        filename)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Data file '{filename}' not found in "
                                f'the expected location: {path}')
    return path
