from wdmsim.tools.cli_examples import performance_main_example

if __name__ == '__main__':
    performance_main_example()
